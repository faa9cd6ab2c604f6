"""Budget management and progress computation."""

from __future__ import annotations

import logging
import uuid
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, localcontext

from sqlalchemy.orm import Session

from fiscal.database import unit_of_work
from fiscal.errors import NotFoundError, ValidationFailedError
from fiscal.models import Budget, Transaction
from fiscal.schemas import BudgetCreate, BudgetUpdate, ErrorDetail, TransactionType
from fiscal.services import category_service

logger = logging.getLogger(__name__)

_CENT = Decimal("0.01")

# Sums of stored amounts stay exact and the percentage always quantizes.
_PROGRESS_PRECISION = 80


def list_budgets(db: Session, owner_id: str, active_only: bool = True) -> list[Budget]:
    q = db.query(Budget).filter(Budget.user_id == owner_id)
    if active_only:
        q = q.filter(Budget.is_active.is_(True))
    return q.order_by(Budget.start_date.desc()).all()


def get_budget(db: Session, owner_id: str, budget_id: str) -> Budget:
    budget = (
        db.query(Budget)
        .filter(Budget.id == budget_id, Budget.user_id == owner_id)
        .first()
    )
    if budget is None:
        raise NotFoundError("Budget not found")
    return budget


def create_budget(db: Session, owner_id: str, data: BudgetCreate) -> Budget:
    category = category_service.get_category(db, owner_id, data.category_id)
    if category.type != TransactionType.expense.value:
        raise ValidationFailedError(
            "Budgets must target an expense category",
            [ErrorDetail(field="category_id", issue=f"'{category.name}' is an {category.type} category")],
        )
    _check_window(data.start_date, data.end_date)

    budget = Budget(
        id=str(uuid.uuid4()),
        user_id=owner_id,
        category_id=category.id,
        amount=data.amount,
        period=data.period.value,
        start_date=data.start_date.isoformat(),
        end_date=data.end_date.isoformat(),
    )
    with unit_of_work(db):
        db.add(budget)
    db.refresh(budget)
    logger.info("budget created id=%s category=%s amount=%s", budget.id, budget.category_id, budget.amount)
    return budget


def update_budget(db: Session, owner_id: str, budget_id: str, data: BudgetUpdate) -> Budget:
    budget = get_budget(db, owner_id, budget_id)
    changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}

    start = changes.get("start_date") or date.fromisoformat(budget.start_date)
    end = changes.get("end_date") or date.fromisoformat(budget.end_date)
    _check_window(start, end)

    for key in ("start_date", "end_date"):
        if key in changes:
            changes[key] = changes[key].isoformat()
    if "period" in changes:
        changes["period"] = changes["period"].value

    with unit_of_work(db):
        for field, value in changes.items():
            setattr(budget, field, value)
    db.refresh(budget)
    return budget


def delete_budget(db: Session, owner_id: str, budget_id: str) -> None:
    budget = get_budget(db, owner_id, budget_id)
    with unit_of_work(db):
        db.delete(budget)


def get_progress(db: Session, owner_id: str, budget_id: str) -> dict:
    """Compute how much of a budget's cap has been spent.

    Recomputed from the transactions on every call: spent is the exact sum of
    the owner's expense transactions in the budget's category dated within
    ``[start_date, end_date]``. A zero cap reports 0% and counts as over
    budget as soon as anything is spent.
    """
    budget = get_budget(db, owner_id, budget_id)

    amounts = (
        db.query(Transaction.amount)
        .filter(
            Transaction.user_id == owner_id,
            Transaction.category_id == budget.category_id,
            Transaction.type == TransactionType.expense.value,
            Transaction.date >= budget.start_date,
            Transaction.date <= budget.end_date,
        )
        .all()
    )
    with localcontext() as ctx:
        ctx.prec = _PROGRESS_PRECISION
        spent = sum((row.amount for row in amounts), Decimal("0"))
        remaining = budget.amount - spent
        if budget.amount == 0:
            percentage = Decimal("0")
        else:
            percentage = spent / budget.amount * 100
        percentage = percentage.quantize(_CENT, rounding=ROUND_HALF_UP)

    return {
        "budget": budget,
        "spent": spent,
        "remaining": remaining,
        "percentage": percentage,
        "is_over_budget": spent > budget.amount,
    }


def _check_window(start: date, end: date) -> None:
    if start > end:
        raise ValidationFailedError(
            "Invalid budget window",
            [ErrorDetail(field="end_date", issue="end_date must not be before start_date")],
        )
