"""Services package."""

from khaatakitab.services.storage import (
    AuditStorageInterface,
    DuplicateError,
    InMemoryAuditStorage,
    InMemoryLedgerStorage,
    InMemoryNotificationStorage,
    InMemoryPreferenceStorage,
    JsonFileLedgerStorage,
    JsonFileNotificationStorage,
    JsonFilePreferenceStorage,
    LedgerStorageInterface,
    LedgerUnavailableError,
    NotFoundError,
    NotificationStorageInterface,
    PreferenceStorageInterface,
    StorageError,
)
from khaatakitab.services.notifications import (
    NotificationError,
    NotificationService,
    NotificationSink,
    PreferenceService,
    SmsDeliveryError,
    SmsGatewayClient,
    ToastQueueSink,
)

__all__ = [
    # Storage services
    "AuditStorageInterface",
    "DuplicateError",
    "InMemoryAuditStorage",
    "InMemoryLedgerStorage",
    "InMemoryNotificationStorage",
    "InMemoryPreferenceStorage",
    "JsonFileLedgerStorage",
    "JsonFileNotificationStorage",
    "JsonFilePreferenceStorage",
    "LedgerStorageInterface",
    "LedgerUnavailableError",
    "NotFoundError",
    "NotificationStorageInterface",
    "PreferenceStorageInterface",
    "StorageError",
    # Notification services
    "NotificationError",
    "NotificationService",
    "NotificationSink",
    "PreferenceService",
    "SmsDeliveryError",
    "SmsGatewayClient",
    "ToastQueueSink",
]
