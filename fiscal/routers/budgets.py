"""Budget endpoints: create, list, get, update, delete, progress."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fiscal.auth import CurrentUser
from fiscal.database import get_db
from fiscal.models import User
from fiscal.schemas import BudgetCreate, BudgetOut, BudgetProgress, BudgetUpdate, SuccessResponse
from fiscal.services import budget_service

router = APIRouter(prefix="/v1")


@router.post("/budgets", response_model=BudgetOut, status_code=201)
async def create_budget(body: BudgetCreate, user: User = CurrentUser, db: Session = Depends(get_db)):
    return BudgetOut.model_validate(budget_service.create_budget(db, user.id, body))


@router.get("/budgets", response_model=list[BudgetOut])
async def list_budgets(active_only: bool = True, user: User = CurrentUser, db: Session = Depends(get_db)):
    budgets = budget_service.list_budgets(db, user.id, active_only=active_only)
    return [BudgetOut.model_validate(b) for b in budgets]


@router.get("/budgets/{budget_id}", response_model=BudgetOut)
async def get_budget(budget_id: str, user: User = CurrentUser, db: Session = Depends(get_db)):
    return BudgetOut.model_validate(budget_service.get_budget(db, user.id, budget_id))


@router.get("/budgets/{budget_id}/progress", response_model=BudgetProgress)
async def budget_progress(budget_id: str, user: User = CurrentUser, db: Session = Depends(get_db)):
    progress = budget_service.get_progress(db, user.id, budget_id)
    return BudgetProgress(
        budget=BudgetOut.model_validate(progress["budget"]),
        spent=progress["spent"],
        remaining=progress["remaining"],
        percentage=progress["percentage"],
        is_over_budget=progress["is_over_budget"],
    )


@router.patch("/budgets/{budget_id}", response_model=BudgetOut)
async def update_budget(
    budget_id: str, body: BudgetUpdate, user: User = CurrentUser, db: Session = Depends(get_db),
):
    return BudgetOut.model_validate(budget_service.update_budget(db, user.id, budget_id, body))


@router.delete("/budgets/{budget_id}", response_model=SuccessResponse)
async def delete_budget(budget_id: str, user: User = CurrentUser, db: Session = Depends(get_db)):
    budget_service.delete_budget(db, user.id, budget_id)
    return SuccessResponse()
