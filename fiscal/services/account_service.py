"""Account management and balance arithmetic."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from decimal import Context, Decimal, Inexact, InvalidOperation, Overflow
from typing import TypeVar

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from fiscal.config import settings
from fiscal.database import unit_of_work
from fiscal.errors import ConflictError, NotFoundError, ValidationFailedError
from fiscal.models import Account
from fiscal.schemas import AccountCreate, AccountUpdate, ErrorDetail, TransactionType

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Balance arithmetic must be exact; any rounding is an error.
_EXACT = Context(prec=28, traps=[Inexact, InvalidOperation, Overflow])


def signed_delta(txn_type: str, amount: Decimal) -> Decimal:
    """Income adds to a balance, expense subtracts from it."""
    if txn_type == TransactionType.income.value:
        return amount
    return -amount


def list_accounts(db: Session, owner_id: str, active_only: bool = False) -> list[Account]:
    q = db.query(Account).filter(Account.user_id == owner_id)
    if active_only:
        q = q.filter(Account.is_active.is_(True))
    return q.order_by(Account.name).all()


def get_account(db: Session, owner_id: str, account_id: str) -> Account:
    acct = (
        db.query(Account)
        .filter(Account.id == account_id, Account.user_id == owner_id)
        .first()
    )
    if acct is None:
        raise NotFoundError("Account not found")
    return acct


def lock_account(db: Session, owner_id: str, account_id: str) -> Account:
    """Load an owned account for a balance write, taking a row lock where supported."""
    acct = (
        db.query(Account)
        .filter(Account.id == account_id, Account.user_id == owner_id)
        .with_for_update()
        .populate_existing()
        .first()
    )
    if acct is None:
        raise NotFoundError("Account not found")
    return acct


def apply_delta(acct: Account, delta: Decimal) -> None:
    try:
        acct.balance = _EXACT.add(acct.balance, delta)
    except (Inexact, InvalidOperation, Overflow):
        raise ValidationFailedError(
            "Balance cannot be represented exactly",
            [ErrorDetail(field="amount", issue="resulting balance exceeds 28 significant digits")],
        ) from None


def create_account(db: Session, owner_id: str, data: AccountCreate) -> Account:
    acct = Account(
        id=str(uuid.uuid4()),
        user_id=owner_id,
        name=data.name,
        type=data.type.value,
        balance=data.balance,
        currency=data.currency or settings.default_currency,
        color=data.color,
        icon=data.icon,
    )
    with unit_of_work(db):
        db.add(acct)
    db.refresh(acct)
    logger.info("account created id=%s owner=%s", acct.id, owner_id)
    return acct


def update_account(db: Session, owner_id: str, account_id: str, data: AccountUpdate) -> Account:
    """Update descriptive fields. The balance is only moved by postings and adjustments."""
    changes = {
        field: value
        for field, value in data.model_dump(exclude_unset=True).items()
        if value is not None or field in ("color", "icon")
    }
    if "type" in changes:
        changes["type"] = changes["type"].value

    def _update() -> Account:
        acct = lock_account(db, owner_id, account_id)
        for field, value in changes.items():
            setattr(acct, field, value)
        return acct

    acct = with_balance_retry(db, _update)
    db.refresh(acct)
    return acct


def delete_account(db: Session, owner_id: str, account_id: str) -> None:
    def _delete() -> None:
        db.delete(lock_account(db, owner_id, account_id))

    with_balance_retry(db, _delete)
    logger.info("account deleted id=%s owner=%s", account_id, owner_id)


def with_balance_retry(db: Session, operation: Callable[[], T]) -> T:
    """Run ``operation`` as one unit of work, retrying when an account version check fails.

    ``operation`` must (re)load every account it touches, since a rollback
    discards whatever it read on the previous attempt.
    """
    attempts = settings.balance_retry_attempts
    for attempt in range(1, attempts + 1):
        try:
            with unit_of_work(db):
                return operation()
        except StaleDataError:
            logger.warning("concurrent balance write detected (attempt %d/%d)", attempt, attempts)
    raise ConflictError("CONFLICT", "Account balance was changed concurrently, please retry")


def adjust_balance(db: Session, owner_id: str, account_id: str, amount: Decimal, note: str | None = None) -> Account:
    """Move a balance directly, without a transaction behind it (e.g. reconciling with a bank statement)."""

    def _adjust() -> Account:
        acct = lock_account(db, owner_id, account_id)
        apply_delta(acct, amount)
        return acct

    acct = with_balance_retry(db, _adjust)
    db.refresh(acct)
    logger.info("account adjusted id=%s delta=%s note=%r", account_id, amount, note)
    return acct


def total_balance(db: Session, owner_id: str) -> Decimal:
    return sum(
        (a.balance for a in list_accounts(db, owner_id, active_only=True)),
        Decimal("0"),
    )
