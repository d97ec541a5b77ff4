"""
Storage Package

SQLAlchemy schema and async session handling for the embedded SQLite store.
"""

from finledger.store.database import Database
from finledger.store.schema import (
    Account,
    Base,
    Money,
    MonthlyBudget,
    Transaction,
    User,
)

__all__ = [
    "Database",
    # Schema
    "Account",
    "Base",
    "Money",
    "MonthlyBudget",
    "Transaction",
    "User",
]
