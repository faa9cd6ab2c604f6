"""Pydantic models for request/response validation."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, EmailStr, Field, field_validator

# At most 20 significant digits, 4 of them after the point.
Money = Annotated[Decimal, Field(max_digits=20, decimal_places=4)]

BCRYPT_MAX_BYTES = 72


# ── Enumerations ──────────────────────────────────────────────────────────────

class TransactionType(str, Enum):
    income = "income"
    expense = "expense"


class AccountType(str, Enum):
    bank = "bank"
    cash = "cash"
    e_wallet = "e-wallet"
    credit_card = "credit-card"


class BudgetPeriod(str, Enum):
    monthly = "monthly"
    weekly = "weekly"
    yearly = "yearly"


# ── Error schemas ─────────────────────────────────────────────────────────────

class ErrorDetail(BaseModel):
    field: str | None = None
    issue: str | None = None


class ErrorResponse(BaseModel):
    code: str
    message: str
    details: list[ErrorDetail] = []


class ErrorEnvelope(BaseModel):
    error: ErrorResponse


class SuccessResponse(BaseModel):
    success: bool = True


# ── User / session ────────────────────────────────────────────────────────────

class SignupRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=64)
    name: str | None = None

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        if len(v.encode("utf-8")) > BCRYPT_MAX_BYTES:
            raise ValueError(f"password must be at most {BCRYPT_MAX_BYTES} bytes when UTF-8 encoded")
        return v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UserUpdate(BaseModel):
    name: str | None = Field(None, min_length=1)


class UserOut(BaseModel):
    id: str
    email: str
    name: str | None = None
    created_at: dt.datetime

    model_config = {"from_attributes": True}


class SessionOut(BaseModel):
    token: str
    user: UserOut


# ── Account ───────────────────────────────────────────────────────────────────

class AccountCreate(BaseModel):
    name: str = Field(..., min_length=1)
    type: AccountType
    balance: Money = Decimal("0")
    currency: str | None = Field(None, min_length=3, max_length=3)
    color: str | None = None
    icon: str | None = None

    @field_validator("currency")
    @classmethod
    def upper_currency(cls, v: str | None) -> str | None:
        return v.upper() if v else v


class AccountUpdate(BaseModel):
    name: str | None = Field(None, min_length=1)
    type: AccountType | None = None
    color: str | None = None
    icon: str | None = None
    is_active: bool | None = None


class AccountOut(BaseModel):
    id: str
    user_id: str
    name: str
    type: str
    balance: Decimal
    currency: str
    color: str | None = None
    icon: str | None = None
    is_active: bool
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = {"from_attributes": True}


class AdjustRequest(BaseModel):
    amount: Money
    note: str | None = None

    @field_validator("amount")
    @classmethod
    def amount_must_be_nonzero(cls, v: Decimal) -> Decimal:
        if v == 0:
            raise ValueError("adjustment amount must not be zero")
        return v


class TotalBalance(BaseModel):
    total: Decimal


# ── Category ──────────────────────────────────────────────────────────────────

class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1)
    type: TransactionType
    icon: str | None = None
    color: str | None = None


class CategoryUpdate(BaseModel):
    name: str | None = Field(None, min_length=1)
    icon: str | None = None
    color: str | None = None


class CategoryOut(BaseModel):
    id: str
    user_id: str | None = None
    name: str
    type: str
    icon: str | None = None
    color: str | None = None
    is_system: bool
    created_at: dt.datetime

    model_config = {"from_attributes": True}


# ── Transaction ───────────────────────────────────────────────────────────────

class TransactionCreate(BaseModel):
    account_id: str
    category_id: str
    type: TransactionType
    amount: Money = Field(..., gt=0)
    date: dt.date
    description: str | None = None
    notes: str | None = None


class TransactionUpdate(BaseModel):
    """Partial update. ``type`` cannot change after posting."""

    account_id: str | None = None
    category_id: str | None = None
    amount: Money | None = Field(None, gt=0)
    date: dt.date | None = None
    description: str | None = None
    notes: str | None = None


class TransactionOut(BaseModel):
    id: str
    user_id: str
    account_id: str
    category_id: str
    type: str
    amount: Decimal
    description: str | None = None
    date: dt.date
    notes: str | None = None
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = {"from_attributes": True}


# ── Budget ────────────────────────────────────────────────────────────────────

class BudgetCreate(BaseModel):
    category_id: str
    amount: Money = Field(..., ge=0)
    period: BudgetPeriod = BudgetPeriod.monthly
    start_date: dt.date
    end_date: dt.date


class BudgetUpdate(BaseModel):
    amount: Money | None = Field(None, ge=0)
    period: BudgetPeriod | None = None
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    is_active: bool | None = None


class BudgetOut(BaseModel):
    id: str
    user_id: str
    category_id: str
    amount: Decimal
    period: str
    start_date: dt.date
    end_date: dt.date
    is_active: bool
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = {"from_attributes": True}


class BudgetProgress(BaseModel):
    budget: BudgetOut
    spent: Decimal
    remaining: Decimal
    percentage: Decimal
    is_over_budget: bool


# ── Goal ──────────────────────────────────────────────────────────────────────

class GoalCreate(BaseModel):
    name: str = Field(..., min_length=1)
    target_amount: Money = Field(..., gt=0)
    current_amount: Money = Field(Decimal("0"), ge=0)
    deadline: dt.date | None = None
    icon: str | None = None
    color: str | None = None


class GoalUpdate(BaseModel):
    name: str | None = Field(None, min_length=1)
    target_amount: Money | None = Field(None, gt=0)
    current_amount: Money | None = Field(None, ge=0)
    deadline: dt.date | None = None
    icon: str | None = None
    color: str | None = None
    is_completed: bool | None = None


class GoalOut(BaseModel):
    id: str
    user_id: str
    name: str
    target_amount: Decimal
    current_amount: Decimal
    deadline: dt.date | None = None
    icon: str | None = None
    color: str | None = None
    is_completed: bool
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = {"from_attributes": True}


class AddMoneyRequest(BaseModel):
    amount: Money = Field(..., gt=0)
