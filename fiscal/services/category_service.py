"""System and user categories."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from fiscal.database import unit_of_work
from fiscal.errors import ConflictError, ForbiddenError, NotFoundError
from fiscal.models import Category, Transaction
from fiscal.schemas import CategoryCreate, CategoryUpdate

logger = logging.getLogger(__name__)


def _visible_to(owner_id: str):
    return or_(Category.is_system.is_(True), Category.user_id == owner_id)


def list_categories(db: Session, owner_id: str, category_type: str | None = None) -> list[Category]:
    q = db.query(Category).filter(_visible_to(owner_id))
    if category_type:
        q = q.filter(Category.type == category_type)
    return q.order_by(Category.type, Category.name).all()


def get_category(db: Session, owner_id: str, category_id: str) -> Category:
    """Return a system category or one of the caller's own."""
    cat = (
        db.query(Category)
        .filter(Category.id == category_id, _visible_to(owner_id))
        .first()
    )
    if cat is None:
        raise NotFoundError("Category not found")
    return cat


def create_category(db: Session, owner_id: str, data: CategoryCreate) -> Category:
    cat = Category(
        id=str(uuid.uuid4()),
        user_id=owner_id,
        name=data.name,
        type=data.type.value,
        icon=data.icon,
        color=data.color,
        is_system=False,
    )
    with unit_of_work(db):
        db.add(cat)
    db.refresh(cat)
    return cat


def update_category(db: Session, owner_id: str, category_id: str, data: CategoryUpdate) -> Category:
    cat = _get_mutable_category(db, owner_id, category_id)
    with unit_of_work(db):
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and field == "name":
                continue
            setattr(cat, field, value)
    db.refresh(cat)
    return cat


def delete_category(db: Session, owner_id: str, category_id: str) -> None:
    cat = _get_mutable_category(db, owner_id, category_id)
    try:
        with unit_of_work(db):
            if _in_use(db, cat.id):
                raise ConflictError("CATEGORY_IN_USE", "Category is used by existing transactions")
            db.delete(cat)
    except IntegrityError:
        # a transaction was posted against it after the check
        raise ConflictError("CATEGORY_IN_USE", "Category is used by existing transactions") from None
    logger.info("category deleted id=%s owner=%s", category_id, owner_id)


def _in_use(db: Session, category_id: str) -> bool:
    return db.query(Transaction.id).filter(Transaction.category_id == category_id).first() is not None


def _get_mutable_category(db: Session, owner_id: str, category_id: str) -> Category:
    cat = db.query(Category).filter(Category.id == category_id).first()
    if cat is None:
        raise NotFoundError("Category not found")
    if cat.is_system:
        raise ForbiddenError("System categories cannot be modified")
    if cat.user_id != owner_id:
        raise NotFoundError("Category not found")
    return cat
