"""
Configuration Management for Party Payback

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The thresholds that decide whether a split is valid or a balance is
settled live in one place instead of being scattered as magic numbers.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    """Expense entry and settlement configuration."""

    model_config = SettingsConfigDict(
        env_prefix="PAYBACK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    split_tolerance: float = Field(
        default=0.01,
        gt=0.0,
        le=1.0,
        description="How far split percentages may stray from 100 and still be accepted"
    )
    settlement_epsilon: float = Field(
        default=1e-9,
        gt=0.0,
        le=0.005,
        description="Outstanding amounts below this are treated as settled"
    )
    min_participants_for_expense: int = Field(
        default=2,
        ge=1,
        description="Expenses can only be recorded once this many people exist"
    )
    max_name_length: int = Field(
        default=100,
        ge=1,
        le=500,
        description="Maximum length of a participant's display name"
    )
    max_description_length: int = Field(
        default=200,
        ge=1,
        le=1000,
        description="Maximum length of an expense description"
    )
    max_expense_amount: float = Field(
        default=1_000_000.0,
        gt=0.0,
        le=1e12,
        description="Largest amount a single expense may have"
    )
    currency_symbol: str = Field(
        default="$",
        max_length=5,
        description="Symbol shown in front of amounts"
    )


class LoggingSettings(BaseSettings):
    """Structured logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="PAYBACK_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    level: str = Field(
        default="INFO",
        description="Minimum log level"
    )
    render_json: bool = Field(
        default=True,
        description="Render log lines as JSON (False = human-readable console output)"
    )

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Only accept levels the stdlib logging module knows about."""
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

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()


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

    Returns a dict of {setting_name: is_valid}, plus a
    "<name>_error" entry for every group that failed to load.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.ledger
        results["ledger"] = True
    except Exception as e:
        results["ledger"] = False
        results["ledger_error"] = str(e)

    try:
        _ = settings.logging
        results["logging"] = True
    except Exception as e:
        results["logging"] = False
        results["logging_error"] = str(e)

    return results
