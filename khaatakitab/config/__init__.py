"""Configuration package."""

from khaatakitab.config.settings import (
    AppSettings,
    LedgerSettings,
    Settings,
    SmsSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "LedgerSettings",
    "Settings",
    "SmsSettings",
    "get_settings",
    "validate_all_settings",
]
