"""
Core Data Models for finledger

These models define the schemas for everything crossing the boundary
between the presentation layer and the ledger engine:
1. Request payloads (validated on the way in)
2. Read views (built from store rows on the way out)
3. Operation results ({ok, message})

Payload models accept the presentation layer's camelCase keys
(``accountId``, ``initialBalance``, ...) as well as snake_case names.

Money is always a ``Decimal`` quantized to cents.
"""

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


CENTS = Decimal("0.01")

# Largest magnitude accepted for any amount or balance; keeps cents well
# inside the store's 64-bit integer column.
MAX_AMOUNT = Decimal("10000000000000.00")


def quantize_money(value: Decimal) -> Decimal:
    """Round a monetary value to cents (half up)."""
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class AccountType(str, Enum):
    """Supported account kinds."""
    CHECKING = "checking"
    SAVINGS = "savings"
    CASH = "cash"
    CREDIT = "credit"


class TransactionType(str, Enum):
    """
    Direction of a transaction.

    The type decides the sign of the balance delta:
    income adds to the account, expense subtracts from it.
    """
    INCOME = "income"
    EXPENSE = "expense"


class BudgetLevel(str, Enum):
    """Spend-versus-limit classification for a monthly budget."""
    OK = "ok"
    WARNING = "warning"
    EXCEEDED = "exceeded"


# Default category names offered by the presentation layer.
# Category is free text in the store; nothing enforces this catalog.
CATEGORY_SUGGESTIONS: dict[TransactionType, list[str]] = {
    TransactionType.INCOME: [
        "Salario",
        "Freelance",
        "Investimentos",
        "Presente",
        "Outros",
    ],
    TransactionType.EXPENSE: [
        "Alimentacao",
        "Moradia",
        "Transporte",
        "Saude",
        "Educacao",
        "Lazer",
        "Contas",
        "Outros",
    ],
}


# =============================================================================
# REQUEST PAYLOADS
# =============================================================================

class _Payload(BaseModel):
    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
        extra="ignore",
    )


class RegisterRequest(_Payload):
    """New user registration."""

    name: str = Field(..., min_length=1, max_length=120)
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class LoginRequest(_Payload):
    """Email/password pair presented at login."""

    email: str = Field(default="")
    password: str = Field(default="")

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class AccountCreate(_Payload):
    """Payload for opening a new account."""

    name: str = Field(..., min_length=1, max_length=120)
    type: AccountType
    initial_balance: Decimal = Field(
        default=Decimal("0"),
        ge=-MAX_AMOUNT,
        le=MAX_AMOUNT,
        alias="initialBalance",
        description="Opening balance; may be negative (e.g. credit)"
    )

    @field_validator('initial_balance')
    @classmethod
    def round_initial_balance(cls, v: Decimal) -> Decimal:
        return quantize_money(v)


class TransactionCreate(_Payload):
    """
    Payload for recording a transaction.

    Amount is always positive; the type carries the direction.
    """

    account_id: int = Field(..., gt=0, alias="accountId")
    type: TransactionType
    category: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    amount: Decimal = Field(..., gt=0, le=MAX_AMOUNT)
    date: date

    @field_validator('description')
    @classmethod
    def blank_description_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    @field_validator('amount')
    @classmethod
    def round_amount(cls, v: Decimal) -> Decimal:
        rounded = quantize_money(v)
        if rounded <= 0:
            raise ValueError("Amount must be at least 0.01")
        return rounded


class TransactionUpdate(TransactionCreate):
    """Payload for editing an existing transaction; every mutable field is replaced."""

    id: int = Field(..., gt=0)


class TransactionFilters(_Payload):
    """Optional, AND-combined filters for listing transactions."""

    start_date: Optional[date] = Field(default=None, alias="startDate")
    end_date: Optional[date] = Field(default=None, alias="endDate")
    type: Optional[TransactionType] = None
    category: Optional[str] = None
    account_id: Optional[int] = Field(default=None, alias="accountId")

    @field_validator('type', mode='before')
    @classmethod
    def all_means_both(cls, v):
        if v in ("all", ""):
            return None
        return v

    @field_validator('category', mode='before')
    @classmethod
    def blank_category_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator('account_id', mode='before')
    @classmethod
    def zero_account_is_none(cls, v):
        if v in (0, "0", ""):
            return None
        return v


class BudgetSet(_Payload):
    """Create-or-replace the limit for one (month, category) pair."""

    month: str = Field(
        ...,
        pattern=r"^\d{4}-(0[1-9]|1[0-2])$",
        description="Budget month as YYYY-MM"
    )
    category: str = Field(..., min_length=1, max_length=100)
    limit_amount: Decimal = Field(..., gt=0, le=MAX_AMOUNT, alias="limitAmount")

    @field_validator('limit_amount')
    @classmethod
    def round_limit(cls, v: Decimal) -> Decimal:
        rounded = quantize_money(v)
        if rounded <= 0:
            raise ValueError("Limit must be at least 0.01")
        return rounded


# =============================================================================
# READ VIEWS
# =============================================================================

class UserView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str


class AccountView(BaseModel):
    """An account as shown to the user."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    type: AccountType
    initial_balance: Decimal
    current_balance: Decimal
    created_at: datetime


class TransactionView(BaseModel):
    """A transaction joined with the display name of its account."""

    id: int
    account_id: int
    account_name: str
    type: TransactionType
    category: str
    description: Optional[str] = None
    amount: Decimal
    date: date
    created_at: datetime


class Summary(BaseModel):
    """
    Headline totals for a user.

    ``balance`` is the sum of the accounts' current balances, so it
    includes opening balances and is not ``income - expense``.
    """

    income: Decimal = Decimal("0.00")
    expense: Decimal = Decimal("0.00")
    balance: Decimal = Decimal("0.00")
    transactions: int = Field(default=0, ge=0)


class BudgetStatus(BaseModel):
    """Spend against one category budget in one month."""

    category: str
    limit: Decimal
    spent: Decimal
    remaining: Decimal
    percent: float = Field(ge=0.0)
    status: BudgetLevel


class TrendPoint(BaseModel):
    """One calendar month of the trend window."""

    month: str = Field(..., description="YYYY-MM")
    income: Decimal = Decimal("0.00")
    expense: Decimal = Decimal("0.00")
    net: Decimal = Decimal("0.00")


# =============================================================================
# RESULTS
# =============================================================================

class OperationResult(BaseModel):
    """
    Outcome of a write operation.

    Never partial: either everything was applied (ok=True) or nothing was.
    """

    ok: bool
    message: Optional[str] = None
    id: Optional[int] = Field(
        default=None,
        description="Identifier of the created row, when one was created"
    )


class AuthResult(BaseModel):
    ok: bool
    message: Optional[str] = None
    user: Optional[UserView] = None
