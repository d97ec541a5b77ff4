"""
Relational schema for the embedded store.

Referential and domain integrity live in the schema itself (foreign
keys, CHECK and UNIQUE constraints), so a bad write is refused by the
store even if it slips past payload validation.

Monetary columns are integers holding cents; the ``Money`` type converts
to and from ``Decimal`` at the boundary.
"""

from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.types import TypeDecorator

from finledger.models.ledger import quantize_money


Base = declarative_base()


class Money(TypeDecorator):
    """Decimal in Python, integer cents in the database."""

    impl = Integer
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return int(quantize_money(Decimal(str(value))) * 100)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return quantize_money(Decimal(value) / 100)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(120), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())


class Account(Base):
    __tablename__ = "accounts"
    __table_args__ = (
        CheckConstraint(
            "type IN ('checking', 'savings', 'cash', 'credit')",
            name="ck_accounts_type",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(120), nullable=False)
    type = Column(String(20), nullable=False)
    initial_balance = Column(Money, nullable=False, default=Decimal("0"))
    # Only moved through the balance ledger's apply_delta
    current_balance = Column(Money, nullable=False, default=Decimal("0"))
    created_at = Column(DateTime, nullable=False, server_default=func.now())


class Transaction(Base):
    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint("type IN ('income', 'expense')", name="ck_transactions_type"),
        CheckConstraint("amount > 0", name="ck_transactions_amount_positive"),
        Index("ix_transactions_user_date", "user_id", "tx_date"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    account_id = Column(
        Integer,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    type = Column(String(10), nullable=False)
    category = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    amount = Column(Money, nullable=False)
    tx_date = Column(Date, nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())


class MonthlyBudget(Base):
    __tablename__ = "monthly_budgets"
    __table_args__ = (
        UniqueConstraint("user_id", "month", "category", name="uq_budget_user_month_category"),
        CheckConstraint("limit_amount > 0", name="ck_budgets_limit_positive"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    month = Column(String(7), nullable=False)  # YYYY-MM
    category = Column(String(100), nullable=False)
    limit_amount = Column(Money, nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now())
