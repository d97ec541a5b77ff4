"""Ledger event logging package."""

from finledger.events.logger import EventLogger, configure_logging, create_correlation_id

__all__ = ["EventLogger", "configure_logging", "create_correlation_id"]
