"""Account endpoints: create, list, update, delete, total balance, adjust."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fiscal.auth import CurrentUser
from fiscal.database import get_db
from fiscal.models import User
from fiscal.schemas import (
    AccountCreate,
    AccountOut,
    AccountUpdate,
    AdjustRequest,
    SuccessResponse,
    TotalBalance,
)
from fiscal.services import account_service

router = APIRouter(prefix="/v1")


@router.post("/accounts", response_model=AccountOut, status_code=201)
async def create_account(body: AccountCreate, user: User = CurrentUser, db: Session = Depends(get_db)):
    acct = account_service.create_account(db, user.id, body)
    return AccountOut.model_validate(acct)


@router.get("/accounts", response_model=list[AccountOut])
async def list_accounts(active_only: bool = False, user: User = CurrentUser, db: Session = Depends(get_db)):
    accounts = account_service.list_accounts(db, user.id, active_only=active_only)
    return [AccountOut.model_validate(a) for a in accounts]


@router.get("/accounts/total-balance", response_model=TotalBalance)
async def total_balance(user: User = CurrentUser, db: Session = Depends(get_db)):
    return TotalBalance(total=account_service.total_balance(db, user.id))


@router.get("/accounts/{account_id}", response_model=AccountOut)
async def get_account(account_id: str, user: User = CurrentUser, db: Session = Depends(get_db)):
    return AccountOut.model_validate(account_service.get_account(db, user.id, account_id))


@router.patch("/accounts/{account_id}", response_model=AccountOut)
async def update_account(
    account_id: str, body: AccountUpdate, user: User = CurrentUser, db: Session = Depends(get_db),
):
    acct = account_service.update_account(db, user.id, account_id, body)
    return AccountOut.model_validate(acct)


@router.delete("/accounts/{account_id}", response_model=SuccessResponse)
async def delete_account(account_id: str, user: User = CurrentUser, db: Session = Depends(get_db)):
    account_service.delete_account(db, user.id, account_id)
    return SuccessResponse()


@router.post("/accounts/{account_id}/adjust", response_model=AccountOut)
async def adjust_account(
    account_id: str, body: AdjustRequest, user: User = CurrentUser, db: Session = Depends(get_db),
):
    acct = account_service.adjust_balance(db, user.id, account_id, body.amount, body.note)
    return AccountOut.model_validate(acct)
