import os
import tempfile
import uuid
from decimal import Decimal

os.environ.setdefault("FISCAL_DB_PATH", os.path.join(tempfile.mkdtemp(), "fiscal-test.db"))
os.environ.setdefault("FISCAL_SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from fiscal.auth import hash_password, issue_session_token
from fiscal.database import Base, get_db, set_sqlite_pragmas
from fiscal.main import app
from fiscal.models import Account, Category, User
from fiscal.schemas import AccountCreate, AccountType
from fiscal.seed import seed_defaults
from fiscal.services import account_service

PASSWORD = "correct-horse-battery"
_PASSWORD_HASH = hash_password(PASSWORD)


def make_engine(url: str = "sqlite+pysqlite:///:memory:"):
    kwargs = {"connect_args": {"check_same_thread": False}}
    if ":memory:" in url:
        kwargs["poolclass"] = StaticPool
    engine = create_engine(url, **kwargs)
    event.listen(engine, "connect", set_sqlite_pragmas)
    Base.metadata.create_all(engine)
    return engine


def make_user(db: Session, email: str, name: str | None = None) -> User:
    user = User(id=str(uuid.uuid4()), email=email, name=name, password_hash=_PASSWORD_HASH)
    db.add(user)
    db.commit()
    return user


def make_account(db: Session, owner: User, balance: str = "1000000", name: str = "BCA") -> Account:
    return account_service.create_account(
        db, owner.id, AccountCreate(name=name, type=AccountType.bank, balance=Decimal(balance)),
    )


def system_category(db: Session, name: str) -> Category:
    return db.query(Category).filter(Category.is_system.is_(True), Category.name == name).one()


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {issue_session_token(user.id)}"}


@pytest.fixture
def db():
    engine = make_engine()
    SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    session = SessionLocal()
    seed_defaults(session)
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def alice(db):
    return make_user(db, "alice@example.com", "Alice")


@pytest.fixture
def bob(db):
    return make_user(db, "bob@example.com", "Bob")


@pytest.fixture
def food(db):
    return system_category(db, "Food & Dining")


@pytest.fixture
def salary(db):
    return system_category(db, "Salary")


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
