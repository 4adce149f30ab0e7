"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Ships an in-memory backend and a local JSON file backend, and is designed
so a hosted database can be dropped in behind the same interfaces.
"""

from khaatakitab.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    LedgerStorageInterface,
    LedgerUnavailableError,
    NotFoundError,
    NotificationStorageInterface,
    PreferenceStorageInterface,
    StorageError,
)
from khaatakitab.services.storage.json_file import (
    JsonFile,
    JsonFileLedgerStorage,
    JsonFileNotificationStorage,
    JsonFilePreferenceStorage,
)
from khaatakitab.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryLedgerStorage,
    InMemoryNotificationStorage,
    InMemoryPreferenceStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "LedgerStorageInterface",
    "NotificationStorageInterface",
    "PreferenceStorageInterface",
    # Exceptions
    "DuplicateError",
    "LedgerUnavailableError",
    "NotFoundError",
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryLedgerStorage",
    "InMemoryNotificationStorage",
    "InMemoryPreferenceStorage",
    # JSON file implementation
    "JsonFile",
    "JsonFileLedgerStorage",
    "JsonFileNotificationStorage",
    "JsonFilePreferenceStorage",
]
