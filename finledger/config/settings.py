"""
Configuration Management for finledger

Uses pydantic-settings for type-safe configuration from environment variables.

All configuration is centralized here: the database location, the ledger
thresholds and the application environment. Every group can be overridden
through environment variables or a ``.env`` file.
"""

from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Embedded relational store configuration."""
    
    model_config = SettingsConfigDict(
        env_prefix="FINLEDGER_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    url: str = Field(
        default="sqlite+aiosqlite:///finledger.db",
        description="SQLAlchemy async database URL"
    )
    echo: bool = Field(
        default=False,
        description="Echo every SQL statement to the log"
    )
    
    @field_validator('url')
    @classmethod
    def validate_async_sqlite(cls, v: str) -> str:
        """Only the async SQLite driver is supported."""
        if not v.startswith("sqlite+aiosqlite://"):
            raise ValueError(
                f"Unsupported database URL: {v}. Use a sqlite+aiosqlite:// URL."
            )
        return v


class LedgerSettings(BaseSettings):
    """Ledger rules and thresholds."""
    
    model_config = SettingsConfigDict(
        env_prefix="FINLEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    default_account_name: str = Field(
        default="Conta Principal",
        min_length=1,
        description="Name of the checking account created at registration"
    )
    budget_warning_percent: float = Field(
        default=80.0,
        gt=0,
        description="Spent percentage at which a budget turns to 'warning'"
    )
    budget_exceeded_percent: float = Field(
        default=100.0,
        gt=0,
        description="Spent percentage at which a budget turns to 'exceeded'"
    )
    trend_months: int = Field(
        default=6,
        ge=1,
        le=24,
        description="Number of calendar months in the trend window"
    )
    min_password_length: int = Field(
        default=6,
        ge=1,
        description="Minimum password length accepted at registration"
    )
    
    @model_validator(mode='after')
    def validate_thresholds(self) -> 'LedgerSettings':
        if self.budget_warning_percent > self.budget_exceeded_percent:
            raise ValueError("Budget warning threshold cannot be above the exceeded threshold")
        return self


class AppSettings(BaseSettings):
    """
    Main application settings.
    
    Loads configuration from environment variables and .env file.
    """
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for structured log records"
    )
    
    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.
    
    Aggregates all sub-settings for easy access.
    """
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    # Sub-settings are loaded on access so a broken group
    # does not prevent the others from loading.
    
    @property
    def database(self) -> DatabaseSettings:
        return DatabaseSettings()
    
    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()
    
    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).
    
    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.
    
    Returns a dict of {setting_name: is_valid}, plus
    ``<setting_name>_error`` entries for the groups that failed.
    Useful for startup checks.
    """
    results = {}
    
    settings = get_settings()
    
    for name in ("database", "ledger", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)
    
    return results
