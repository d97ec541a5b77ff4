"""
Ledger Event Models

Every significant ledger action produces one structured log record.
Records go to the local structured log only; they are not stored and
cannot be replayed or undone.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from finledger.errors import NotFoundError


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LedgerEventType(str, Enum):
    """Types of events we log."""
    # Authentication
    USER_REGISTERED = "user_registered"
    LOGIN_SUCCEEDED = "login_succeeded"
    LOGIN_FAILED = "login_failed"

    # Accounts
    ACCOUNT_CREATED = "account_created"

    # Transactions
    TRANSACTION_CREATED = "transaction_created"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"

    # Budgets
    BUDGET_SET = "budget_set"

    # Rejections and failures
    VALIDATION_FAILED = "validation_failed"
    NOT_FOUND = "not_found"
    STORE_FAILURE = "store_failure"


class EventSeverity(str, Enum):
    """Severity level for ledger events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LedgerEvent(BaseModel):
    """A single structured log record."""

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: LedgerEventType
    severity: EventSeverity = EventSeverity.INFO

    # Which user and which row this is about
    user_id: Optional[int] = None
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'account', 'transaction', 'budget')"
    )
    entity_id: Optional[int] = None

    # Ties together all records of one inbound call
    correlation_id: Optional[UUID] = None

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "user_id": self.user_id,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class LedgerEventBuilder:
    """
    Helper class to build ledger events with common patterns.

    Usage:
        event = LedgerEventBuilder.transaction_created(user_id, tx_id, "expense", "12.50", cid)
    """

    @staticmethod
    def user_registered(
        user_id: int,
        default_account_id: int,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.USER_REGISTERED,
            user_id=user_id,
            entity_type="user",
            entity_id=user_id,
            correlation_id=correlation_id,
            description="User registered with a default account",
            details={"default_account_id": default_account_id},
        )

    @staticmethod
    def login(
        user_id: Optional[int],
        succeeded: bool,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerEvent:
        if succeeded:
            return LedgerEvent(
                event_type=LedgerEventType.LOGIN_SUCCEEDED,
                user_id=user_id,
                entity_type="user",
                entity_id=user_id,
                correlation_id=correlation_id,
                description="User logged in",
            )
        return LedgerEvent(
            event_type=LedgerEventType.LOGIN_FAILED,
            severity=EventSeverity.WARNING,
            correlation_id=correlation_id,
            description="Login rejected",
        )

    @staticmethod
    def account_created(
        user_id: int,
        account_id: int,
        account_type: str,
        initial_balance: str,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.ACCOUNT_CREATED,
            user_id=user_id,
            entity_type="account",
            entity_id=account_id,
            correlation_id=correlation_id,
            description=f"Account opened ({account_type})",
            details={
                "account_type": account_type,
                "initial_balance": initial_balance,
            },
        )

    @staticmethod
    def transaction_created(
        user_id: int,
        transaction_id: int,
        tx_type: str,
        amount: str,
        account_id: int,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.TRANSACTION_CREATED,
            user_id=user_id,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Transaction recorded: {tx_type} {amount}",
            details={
                "type": tx_type,
                "amount": amount,
                "account_id": account_id,
            },
        )

    @staticmethod
    def transaction_updated(
        user_id: int,
        transaction_id: int,
        old_account_id: int,
        new_account_id: int,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.TRANSACTION_UPDATED,
            user_id=user_id,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description="Transaction updated",
            details={
                "old_account_id": old_account_id,
                "new_account_id": new_account_id,
            },
        )

    @staticmethod
    def transaction_deleted(
        user_id: int,
        transaction_id: int,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.TRANSACTION_DELETED,
            user_id=user_id,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description="Transaction deleted",
        )

    @staticmethod
    def budget_set(
        user_id: int,
        month: str,
        category: str,
        limit_amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.BUDGET_SET,
            user_id=user_id,
            entity_type="budget",
            correlation_id=correlation_id,
            description=f"Budget set for {category} in {month}",
            details={
                "month": month,
                "category": category,
                "limit_amount": limit_amount,
            },
        )

    @staticmethod
    def rejected(
        operation: str,
        error: Exception,
        user_id: Optional[int] = None,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerEvent:
        """Validation and not-found rejections share one shape."""
        event_type = (
            LedgerEventType.NOT_FOUND
            if isinstance(error, NotFoundError)
            else LedgerEventType.VALIDATION_FAILED
        )
        return LedgerEvent(
            event_type=event_type,
            severity=EventSeverity.WARNING,
            user_id=user_id,
            correlation_id=correlation_id,
            description=f"{operation} rejected",
            error_message=str(error),
            details={"operation": operation},
        )

    @staticmethod
    def store_failure(
        operation: str,
        error_message: str,
        user_id: Optional[int] = None,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.STORE_FAILURE,
            severity=EventSeverity.ERROR,
            user_id=user_id,
            correlation_id=correlation_id,
            description=f"Store failure during {operation}",
            error_message=error_message,
            details={"operation": operation},
        )
