"""Transaction posting, amendment, voiding, and querying.

Every write here moves money on an account. Posting applies the
transaction's signed delta to its account, amending reverts the old delta
and applies the new one (possibly on a different account), and voiding
reverts the delta before removing the row. Each of these runs as a single
unit of work through ``account_service.with_balance_retry`` so the row and
the balance change are committed together or not at all.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from fiscal.errors import NotFoundError, ValidationFailedError
from fiscal.models import Category, Transaction
from fiscal.schemas import ErrorDetail, TransactionCreate, TransactionUpdate
from fiscal.services import account_service, category_service
from fiscal.services.account_service import signed_delta

logger = logging.getLogger(__name__)

# Columns a caller may clear by sending null; the rest are required on the row.
_NULLABLE_FIELDS = {"description", "notes"}


def create_transaction(db: Session, owner_id: str, data: TransactionCreate) -> Transaction:
    _require_positive(data.amount)
    txn_type = data.type.value

    def _post() -> Transaction:
        acct = account_service.lock_account(db, owner_id, data.account_id)
        category = category_service.get_category(db, owner_id, data.category_id)
        _check_category_type(category, txn_type)

        txn = Transaction(
            id=str(uuid.uuid4()),
            user_id=owner_id,
            account_id=acct.id,
            category_id=category.id,
            type=txn_type,
            amount=data.amount,
            description=data.description,
            date=data.date.isoformat(),
            notes=data.notes,
        )
        db.add(txn)
        account_service.apply_delta(acct, signed_delta(txn_type, data.amount))
        return txn

    txn = account_service.with_balance_retry(db, _post)
    db.refresh(txn)
    logger.info(
        "transaction posted id=%s account=%s type=%s amount=%s",
        txn.id, txn.account_id, txn.type, txn.amount,
    )
    return txn


def update_transaction(db: Session, owner_id: str, txn_id: str, data: TransactionUpdate) -> Transaction:
    changes = {
        field: value
        for field, value in data.model_dump(exclude_unset=True).items()
        if value is not None or field in _NULLABLE_FIELDS
    }
    if "amount" in changes:
        _require_positive(changes["amount"])
    if "date" in changes:
        changes["date"] = changes["date"].isoformat()

    def _amend() -> Transaction:
        txn = _get_owned(db, owner_id, txn_id)
        old_account = account_service.lock_account(db, owner_id, txn.account_id)

        new_account_id = changes.get("account_id", txn.account_id)
        if new_account_id == old_account.id:
            new_account = old_account
        else:
            new_account = account_service.lock_account(db, owner_id, new_account_id)

        if "category_id" in changes:
            category = category_service.get_category(db, owner_id, changes["category_id"])
            # type is fixed at posting time, so the new category must match it
            _check_category_type(category, txn.type)

        account_service.apply_delta(old_account, -signed_delta(txn.type, txn.amount))
        for field, value in changes.items():
            setattr(txn, field, value)
        account_service.apply_delta(new_account, signed_delta(txn.type, txn.amount))
        return txn

    txn = account_service.with_balance_retry(db, _amend)
    db.refresh(txn)
    logger.info("transaction amended id=%s fields=%s", txn.id, sorted(changes))
    return txn


def delete_transaction(db: Session, owner_id: str, txn_id: str) -> None:
    def _void() -> Transaction:
        txn = _get_owned(db, owner_id, txn_id)
        acct = account_service.lock_account(db, owner_id, txn.account_id)
        account_service.apply_delta(acct, -signed_delta(txn.type, txn.amount))
        db.delete(txn)
        return txn

    txn = account_service.with_balance_retry(db, _void)
    logger.info("transaction voided id=%s account=%s", txn_id, txn.account_id)


def get_transaction(db: Session, owner_id: str, txn_id: str) -> Transaction:
    return _get_owned(db, owner_id, txn_id)


def list_transactions(
    db: Session,
    owner_id: str,
    *,
    account_id: str | None = None,
    category_id: str | None = None,
    txn_type: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    limit: int = 50,
    offset: int = 0,
) -> list[Transaction]:
    q = db.query(Transaction).filter(Transaction.user_id == owner_id)

    if account_id:
        q = q.filter(Transaction.account_id == account_id)
    if category_id:
        q = q.filter(Transaction.category_id == category_id)
    if txn_type:
        q = q.filter(Transaction.type == txn_type)
    if start_date:
        q = q.filter(Transaction.date >= start_date.isoformat())
    if end_date:
        q = q.filter(Transaction.date <= end_date.isoformat())

    return (
        q.order_by(Transaction.date.desc(), Transaction.created_at.desc())
        .limit(limit)
        .offset(offset)
        .all()
    )


def recent_transactions(db: Session, owner_id: str, limit: int = 10) -> list[Transaction]:
    return list_transactions(db, owner_id, limit=limit)


def _get_owned(db: Session, owner_id: str, txn_id: str) -> Transaction:
    txn = (
        db.query(Transaction)
        .filter(Transaction.id == txn_id, Transaction.user_id == owner_id)
        .first()
    )
    if txn is None:
        raise NotFoundError("Transaction not found")
    return txn


def _require_positive(amount: Decimal) -> None:
    if not amount.is_finite() or amount <= 0:
        raise ValidationFailedError(
            "Invalid amount",
            [ErrorDetail(field="amount", issue="amount must be greater than zero")],
        )


def _check_category_type(category: Category, txn_type: str) -> None:
    if category.type != txn_type:
        raise ValidationFailedError(
            "Category type does not match transaction type",
            [ErrorDetail(
                field="category_id",
                issue=f"'{category.name}' is an {category.type} category, transaction is {txn_type}",
            )],
        )
