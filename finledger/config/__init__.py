"""Configuration package."""

from finledger.config.settings import (
    AppSettings,
    DatabaseSettings,
    LedgerSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "DatabaseSettings",
    "LedgerSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
