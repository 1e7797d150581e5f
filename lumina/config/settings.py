"""
Configuration Management for Lumina Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Everything has a working default, so a fresh install runs without a .env file.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from lumina.models.profile import Language


class LedgerSettings(BaseSettings):
    """
    Main ledger settings.

    Loads configuration from LUMINA_* environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="LUMINA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Persistence
    data_dir: Path = Field(
        default=Path(".lumina"),
        description="Directory holding the persisted ledger files"
    )
    transactions_key: str = Field(
        default="lumina_transactions",
        min_length=1,
        description="Storage key for the transaction store"
    )
    profile_key: str = Field(
        default="lumina_user",
        min_length=1,
        description="Storage key for the user profile"
    )
    save_retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="How many times a failed save is attempted"
    )

    # Profile defaults
    default_name: str = Field(
        default="Guest",
        description="Display name for a fresh profile"
    )
    default_currency: str = Field(
        default="$",
        min_length=1,
        description="Currency symbol for a fresh profile"
    )
    default_language: Language = Field(
        default=Language.EN,
        description="Language for a fresh profile"
    )
    sync_id_length: int = Field(
        default=8,
        ge=4,
        le=32,
        description="Length of the generated device label"
    )

    # Sync behaviour
    strict_sync_fields: bool = Field(
        default=False,
        description=(
            "Raise when a sync token lacks 'transactions' or 'user'. "
            "When False the pull is ignored without an error."
        )
    )

    # Audit
    audit_history_size: int = Field(
        default=200,
        ge=0,
        description="How many audit events are kept in memory"
    )

    @field_validator('transactions_key', 'profile_key')
    @classmethod
    def validate_key(cls, v: str) -> str:
        """Keys become file names, so path separators are not allowed."""
        if "/" in v or "\\" in v:
            raise ValueError(f"Storage key must not contain path separators: {v}")
        return v


@lru_cache()
def get_settings() -> LedgerSettings:
    """
    Get ledger settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return LedgerSettings()
