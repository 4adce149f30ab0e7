"""
In-Memory Storage Implementation

Used by tests and as the default backend for a single Streamlit session.
Nothing survives a process restart.
"""

from typing import Optional
from uuid import UUID

from khaatakitab.models.audit import AuditEvent
from khaatakitab.models.ledger import Transaction
from khaatakitab.models.notification import Notification, NotificationPreferences
from khaatakitab.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    LedgerStorageInterface,
    NotFoundError,
    NotificationStorageInterface,
    PreferenceStorageInterface,
)


class InMemoryLedgerStorage(LedgerStorageInterface):
    """Ledger kept in a plain list, in insertion order."""

    def __init__(self, transactions: Optional[list[Transaction]] = None):
        self._transactions: list[Transaction] = list(transactions or [])

    async def list_transactions(self) -> list[Transaction]:
        return list(self._transactions)

    async def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        for transaction in self._transactions:
            if transaction.id == transaction_id:
                return transaction
        return None

    async def append_transaction(self, transaction: Transaction) -> bool:
        if await self.get_transaction(transaction.id) is not None:
            raise DuplicateError(f"Transaction already exists: {transaction.id}")
        self._transactions.append(transaction)
        return True

    async def remove_transaction(self, transaction_id: str) -> bool:
        before = len(self._transactions)
        self._transactions = [t for t in self._transactions if t.id != transaction_id]
        return len(self._transactions) < before

    async def clear(self) -> int:
        removed = len(self._transactions)
        self._transactions = []
        return removed


class InMemoryNotificationStorage(NotificationStorageInterface):

    def __init__(self):
        self._notifications: dict[UUID, Notification] = {}

    async def save_notification(self, notification: Notification) -> bool:
        self._notifications[notification.id] = notification
        return True

    async def list_notifications(self, limit: int = 100) -> list[Notification]:
        # Reverse insertion order first so same-timestamp ties stay newest-first
        newest_first = sorted(
            reversed(list(self._notifications.values())),
            key=lambda n: n.created_at,
            reverse=True,
        )
        return newest_first[:limit]

    async def mark_as_read(self, notification_id: UUID) -> bool:
        notification = self._notifications.get(notification_id)
        if notification is None:
            raise NotFoundError(f"Notification not found: {notification_id}")
        self._notifications[notification_id] = notification.model_copy(
            update={"is_read": True}
        )
        return True

    async def mark_all_as_read(self) -> int:
        changed = 0
        for notification_id, notification in self._notifications.items():
            if not notification.is_read:
                self._notifications[notification_id] = notification.model_copy(
                    update={"is_read": True}
                )
                changed += 1
        return changed

    async def delete_notification(self, notification_id: UUID) -> bool:
        return self._notifications.pop(notification_id, None) is not None


class InMemoryPreferenceStorage(PreferenceStorageInterface):

    def __init__(self, preferences: Optional[NotificationPreferences] = None):
        self._preferences = preferences

    async def load_preferences(self) -> Optional[NotificationPreferences]:
        return self._preferences

    async def save_preferences(self, preferences: NotificationPreferences) -> bool:
        self._preferences = preferences
        return True


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only audit list."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        events = [e for e in self._events if e.correlation_id == correlation_id]
        events.sort(key=lambda e: e.timestamp)
        return events

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        events = sorted(self._events, key=lambda e: e.timestamp, reverse=True)
        return events[:limit]
