"""
Data Models Package

This package contains all Pydantic models used by finledger.
All data crossing the ledger boundary must conform to these schemas.
"""

from finledger.models.ledger import (
    CATEGORY_SUGGESTIONS,
    MAX_AMOUNT,
    AccountCreate,
    AccountType,
    AccountView,
    AuthResult,
    BudgetLevel,
    BudgetSet,
    BudgetStatus,
    LoginRequest,
    OperationResult,
    RegisterRequest,
    Summary,
    TransactionCreate,
    TransactionFilters,
    TransactionType,
    TransactionUpdate,
    TransactionView,
    TrendPoint,
    UserView,
    quantize_money,
)
from finledger.models.events import (
    EventSeverity,
    LedgerEvent,
    LedgerEventBuilder,
    LedgerEventType,
)

__all__ = [
    # Ledger models
    "CATEGORY_SUGGESTIONS",
    "MAX_AMOUNT",
    "AccountCreate",
    "AccountType",
    "AccountView",
    "AuthResult",
    "BudgetLevel",
    "BudgetSet",
    "BudgetStatus",
    "LoginRequest",
    "OperationResult",
    "RegisterRequest",
    "Summary",
    "TransactionCreate",
    "TransactionFilters",
    "TransactionType",
    "TransactionUpdate",
    "TransactionView",
    "TrendPoint",
    "UserView",
    "quantize_money",
    # Event models
    "EventSeverity",
    "LedgerEvent",
    "LedgerEventBuilder",
    "LedgerEventType",
]
