"""
Configuration Management for KhaataKitab

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see what external dependencies exist and
ensures all required configuration is validated at startup.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    """Ledger storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: Literal["memory", "json"] = Field(
        default="memory",
        description="Where transactions are kept"
    )
    data_dir: str = Field(
        default="data",
        description="Directory holding the json backend files"
    )

    @field_validator('data_dir')
    @classmethod
    def validate_data_dir(cls, v: str) -> str:
        """Reject paths that point at an existing regular file."""
        if Path(v).is_file():
            raise ValueError(f"Data directory is a file: {v}")
        return v

    @property
    def ledger_file(self) -> Path:
        return Path(self.data_dir) / "ledger.json"

    @property
    def notifications_file(self) -> Path:
        return Path(self.data_dir) / "notifications.json"

    @property
    def preferences_file(self) -> Path:
        return Path(self.data_dir) / "preferences.json"


class SmsSettings(BaseSettings):
    """SMS gateway configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SMS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    api_url: Optional[str] = Field(
        default=None,
        description="Base URL of the SMS gateway (POST {api_url}/send-sms)"
    )
    timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        le=60,
        description="HTTP timeout for a single gateway call"
    )

    @field_validator('api_url')
    @classmethod
    def strip_trailing_slash(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            return None
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"SMS gateway URL must be http(s): {v}")
        return v.rstrip("/")

    @property
    def is_configured(self) -> bool:
        return self.api_url is not None


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

    # Transaction form limits
    max_transaction_amount_inr: float = Field(
        default=10000000.0,
        gt=0,
        description="Amounts above this are flagged for review (sanity check)"
    )
    future_date_tolerance_days: int = Field(
        default=1,
        ge=0,
        description="How many days in the future a transaction can be dated"
    )
    default_categories: str = Field(
        default="Sales,Services,Inventory,Rent,Salaries,Utilities,Transport,Other",
        description="Comma-separated list of suggested categories"
    )

    @property
    def default_categories_list(self) -> list[str]:
        """Get suggested categories as a list."""
        return [c.strip() for c in self.default_categories.split(",") if c.strip()]


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

    # Sub-settings are built on access so one broken section
    # doesn't take the whole app down.

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def sms(self) -> SmsSettings:
        return SmsSettings()

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

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("ledger", "sms", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
