"""
Ledger Event Logger

Every ledger write, rejection and store failure is logged as one
structured record. Records carry a correlation id so all lines
belonging to one inbound call can be grouped.

Logging is local only. There is no persisted history.
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from finledger.models.events import EventSeverity, LedgerEvent, LedgerEventBuilder


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route finledger records to stderr at the given level."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level, logging.INFO))
    logging.getLogger("finledger").setLevel(level)


class EventLogger:
    """
    Central ledger event logging service.
    
    Thin wrapper around a structlog logger that knows how to
    render ``LedgerEvent`` records at the right level.
    """
    
    def __init__(self, name: str = "finledger"):
        self._logger = structlog.get_logger(name)
    
    def log(self, event: LedgerEvent) -> None:
        """Log a ledger event at the level matching its severity."""
        log_dict = event.to_log_dict()
        
        if event.severity == EventSeverity.ERROR:
            self._logger.error("ledger_event", **log_dict)
        elif event.severity == EventSeverity.WARNING:
            self._logger.warning("ledger_event", **log_dict)
        elif event.severity == EventSeverity.DEBUG:
            self._logger.debug("ledger_event", **log_dict)
        else:
            self._logger.info("ledger_event", **log_dict)
    
    def log_user_registered(
        self,
        user_id: int,
        default_account_id: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(LedgerEventBuilder.user_registered(
            user_id=user_id,
            default_account_id=default_account_id,
            correlation_id=correlation_id,
        ))
    
    def log_login(
        self,
        user_id: Optional[int],
        succeeded: bool,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(LedgerEventBuilder.login(
            user_id=user_id,
            succeeded=succeeded,
            correlation_id=correlation_id,
        ))
    
    def log_account_created(
        self,
        user_id: int,
        account_id: int,
        account_type: str,
        initial_balance: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(LedgerEventBuilder.account_created(
            user_id=user_id,
            account_id=account_id,
            account_type=account_type,
            initial_balance=initial_balance,
            correlation_id=correlation_id,
        ))
    
    def log_transaction_created(
        self,
        user_id: int,
        transaction_id: int,
        tx_type: str,
        amount: str,
        account_id: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(LedgerEventBuilder.transaction_created(
            user_id=user_id,
            transaction_id=transaction_id,
            tx_type=tx_type,
            amount=amount,
            account_id=account_id,
            correlation_id=correlation_id,
        ))
    
    def log_transaction_updated(
        self,
        user_id: int,
        transaction_id: int,
        old_account_id: int,
        new_account_id: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(LedgerEventBuilder.transaction_updated(
            user_id=user_id,
            transaction_id=transaction_id,
            old_account_id=old_account_id,
            new_account_id=new_account_id,
            correlation_id=correlation_id,
        ))
    
    def log_transaction_deleted(
        self,
        user_id: int,
        transaction_id: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(LedgerEventBuilder.transaction_deleted(
            user_id=user_id,
            transaction_id=transaction_id,
            correlation_id=correlation_id,
        ))
    
    def log_budget_set(
        self,
        user_id: int,
        month: str,
        category: str,
        limit_amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(LedgerEventBuilder.budget_set(
            user_id=user_id,
            month=month,
            category=category,
            limit_amount=limit_amount,
            correlation_id=correlation_id,
        ))
    
    def log_rejected(
        self,
        operation: str,
        error: Exception,
        user_id: Optional[int] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a validation or not-found rejection."""
        self.log(LedgerEventBuilder.rejected(
            operation=operation,
            error=error,
            user_id=user_id,
            correlation_id=correlation_id,
        ))
    
    def log_store_failure(
        self,
        operation: str,
        error_message: str,
        user_id: Optional[int] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(LedgerEventBuilder.store_failure(
            operation=operation,
            error_message=error_message,
            user_id=user_id,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.
    
    Use this at the start of each inbound call and pass it
    through every record that call produces.
    """
    return uuid4()
