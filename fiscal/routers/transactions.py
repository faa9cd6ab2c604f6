"""Transaction endpoints: create, list, get, update, delete."""

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from fiscal.auth import CurrentUser
from fiscal.database import get_db
from fiscal.models import User
from fiscal.schemas import (
    SuccessResponse,
    TransactionCreate,
    TransactionOut,
    TransactionType,
    TransactionUpdate,
)
from fiscal.services import transaction_service

router = APIRouter(prefix="/v1")


@router.post("/transactions", response_model=TransactionOut, status_code=201)
async def create_transaction(body: TransactionCreate, user: User = CurrentUser, db: Session = Depends(get_db)):
    txn = transaction_service.create_transaction(db, user.id, body)
    return TransactionOut.model_validate(txn)


@router.get("/transactions", response_model=list[TransactionOut])
async def list_transactions(
    account_id: str | None = None,
    category_id: str | None = None,
    type: TransactionType | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    user: User = CurrentUser,
    db: Session = Depends(get_db),
):
    rows = transaction_service.list_transactions(
        db,
        user.id,
        account_id=account_id,
        category_id=category_id,
        txn_type=type.value if type else None,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
        offset=offset,
    )
    return [TransactionOut.model_validate(r) for r in rows]


@router.get("/transactions/recent", response_model=list[TransactionOut])
async def recent_transactions(
    limit: int = Query(10, ge=1, le=100),
    user: User = CurrentUser,
    db: Session = Depends(get_db),
):
    rows = transaction_service.recent_transactions(db, user.id, limit=limit)
    return [TransactionOut.model_validate(r) for r in rows]


@router.get("/transactions/{txn_id}", response_model=TransactionOut)
async def get_transaction(txn_id: str, user: User = CurrentUser, db: Session = Depends(get_db)):
    return TransactionOut.model_validate(transaction_service.get_transaction(db, user.id, txn_id))


@router.patch("/transactions/{txn_id}", response_model=TransactionOut)
async def update_transaction(
    txn_id: str, body: TransactionUpdate, user: User = CurrentUser, db: Session = Depends(get_db),
):
    txn = transaction_service.update_transaction(db, user.id, txn_id, body)
    return TransactionOut.model_validate(txn)


@router.delete("/transactions/{txn_id}", response_model=SuccessResponse)
async def delete_transaction(txn_id: str, user: User = CurrentUser, db: Session = Depends(get_db)):
    transaction_service.delete_transaction(db, user.id, txn_id)
    return SuccessResponse()
