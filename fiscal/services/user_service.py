"""User signup, login, and profile management."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy.orm import Session

from fiscal.auth import hash_password, verify_password
from fiscal.database import unit_of_work
from fiscal.errors import ConflictError, UnauthorizedError
from fiscal.models import User
from fiscal.schemas import SignupRequest, UserUpdate

logger = logging.getLogger(__name__)


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email.lower()).first()


def signup(db: Session, data: SignupRequest) -> User:
    if get_user_by_email(db, data.email) is not None:
        raise ConflictError("DUPLICATE", "An account with this email already exists")
    user = User(
        id=str(uuid.uuid4()),
        email=data.email.lower(),
        name=data.name,
        password_hash=hash_password(data.password),
    )
    with unit_of_work(db):
        db.add(user)
    db.refresh(user)
    logger.info("user signed up id=%s", user.id)
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    user = get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        raise UnauthorizedError("Invalid email or password")
    return user


def update_profile(db: Session, user: User, data: UserUpdate) -> User:
    with unit_of_work(db):
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(user, field, value)
    db.refresh(user)
    return user


def delete_user(db: Session, user: User) -> None:
    """Remove the user; accounts, categories, transactions, budgets and goals go with it."""
    user_id = user.id
    with unit_of_work(db):
        db.delete(user)
    logger.info("user deleted id=%s", user_id)
