"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap the local file store for a hosted database later
2. Use in-memory storage for testing
3. Keep ledger logic decoupled from where the ledger lives

The interface is intentionally simple - we're not building a full ORM.
Just the operations the ledger, inbox and settings screens need.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from khaatakitab.models.audit import AuditEvent
from khaatakitab.models.ledger import Transaction
from khaatakitab.models.notification import Notification, NotificationPreferences


class LedgerStorageInterface(ABC):
    """
    Abstract interface for the transaction ledger.

    A write that has returned must be visible to the next
    list_transactions() call.
    """

    @abstractmethod
    async def list_transactions(self) -> list[Transaction]:
        """
        Return every transaction in insertion order (oldest first).

        Raises:
            LedgerUnavailableError: If the backend cannot be read
        """
        pass

    @abstractmethod
    async def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """
        Retrieve a transaction by its ID.

        Returns:
            The transaction if found, None otherwise
        """
        pass

    @abstractmethod
    async def append_transaction(self, transaction: Transaction) -> bool:
        """
        Append a transaction to the ledger.

        Returns:
            True if saved successfully

        Raises:
            DuplicateError: If a transaction with the same ID exists
            LedgerUnavailableError: If the backend cannot be written
        """
        pass

    @abstractmethod
    async def remove_transaction(self, transaction_id: str) -> bool:
        """
        Delete a transaction by ID.

        Returns:
            True if deleted, False if no such transaction
        """
        pass

    @abstractmethod
    async def clear(self) -> int:
        """
        Remove every transaction.

        Returns:
            Number of transactions removed
        """
        pass


class NotificationStorageInterface(ABC):
    """Abstract interface for the notification inbox."""

    @abstractmethod
    async def save_notification(self, notification: Notification) -> bool:
        pass

    @abstractmethod
    async def list_notifications(self, limit: int = 100) -> list[Notification]:
        """
        List notifications, newest first.
        """
        pass

    @abstractmethod
    async def mark_as_read(self, notification_id: UUID) -> bool:
        """
        Mark one notification as read.

        Returns:
            True if it was found

        Raises:
            NotFoundError: If no such notification
        """
        pass

    @abstractmethod
    async def mark_all_as_read(self) -> int:
        """
        Mark every unread notification as read.

        Returns:
            Number of notifications changed
        """
        pass

    @abstractmethod
    async def delete_notification(self, notification_id: UUID) -> bool:
        pass


class PreferenceStorageInterface(ABC):
    """Abstract interface for notification preferences (single user)."""

    @abstractmethod
    async def load_preferences(self) -> Optional[NotificationPreferences]:
        """
        Returns:
            Stored preferences, or None if never saved
        """
        pass

    @abstractmethod
    async def save_preferences(self, preferences: NotificationPreferences) -> bool:
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g., one transaction entry).

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class LedgerUnavailableError(StorageError):
    """The ledger backend could not be read or written."""
    pass
