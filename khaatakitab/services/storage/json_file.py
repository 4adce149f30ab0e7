"""
Local JSON File Storage Implementation

DESIGN DECISION: A JSON file per collection is used as the persistent
backend because:
1. The user can open and back up their books without any tooling
2. No database setup required
3. Easy to export/migrate later

TRADEOFFS:
- Whole file is rewritten on every change (fine for one shop's ledger)
- No cross-process locking (one app instance per data directory)

Writes go to a temporary file that is then renamed over the original, so
a crash mid-write leaves the previous version intact.
"""

import json
import os
from pathlib import Path
from typing import Any, Optional
from uuid import UUID

from pydantic import ValidationError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from khaatakitab.models.ledger import Transaction
from khaatakitab.models.notification import Notification, NotificationPreferences
from khaatakitab.services.storage.interface import (
    DuplicateError,
    LedgerStorageInterface,
    LedgerUnavailableError,
    NotFoundError,
    NotificationStorageInterface,
    PreferenceStorageInterface,
    StorageError,
)


_io_retry = retry(
    retry=retry_if_exception_type(OSError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
    reraise=True,
)


class JsonFile:
    """
    A single JSON document on disk.

    Transient OS errors are retried; anything still failing is raised as
    `error_class` so callers see one storage-level exception type.
    """

    def __init__(
        self,
        path: Path,
        default: Any,
        error_class: type[StorageError] = StorageError,
    ):
        self._path = Path(path)
        self._default = default
        self._error_class = error_class

    @property
    def path(self) -> Path:
        return self._path

    @_io_retry
    def _read_text(self) -> Optional[str]:
        if not self._path.exists():
            return None
        return self._path.read_text(encoding="utf-8")

    @_io_retry
    def _write_text(self, text: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp_path.write_text(text, encoding="utf-8")
        os.replace(tmp_path, self._path)

    def load(self) -> Any:
        try:
            text = self._read_text()
        except OSError as e:
            raise self._error_class(f"Failed to read {self._path}: {e}") from e

        if text is None or not text.strip():
            return json.loads(json.dumps(self._default))

        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise self._error_class(f"Corrupt data file {self._path}: {e}") from e

    def save(self, data: Any) -> None:
        try:
            self._write_text(json.dumps(data, indent=2, ensure_ascii=False, default=str))
        except OSError as e:
            raise self._error_class(f"Failed to write {self._path}: {e}") from e


class JsonFileLedgerStorage(LedgerStorageInterface):
    """Ledger persisted as a JSON list of transaction records."""

    def __init__(self, path: Path):
        self._file = JsonFile(path, default=[], error_class=LedgerUnavailableError)

    def _load(self) -> list[Transaction]:
        records = self._file.load()
        try:
            return [Transaction.model_validate(record) for record in records]
        except (ValidationError, TypeError) as e:
            raise LedgerUnavailableError(
                f"Ledger file {self._file.path} contains invalid transactions: {e}"
            ) from e

    def _save(self, transactions: list[Transaction]) -> None:
        self._file.save([t.model_dump(mode="json") for t in transactions])

    async def list_transactions(self) -> list[Transaction]:
        return self._load()

    async def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        for transaction in self._load():
            if transaction.id == transaction_id:
                return transaction
        return None

    async def append_transaction(self, transaction: Transaction) -> bool:
        transactions = self._load()
        if any(t.id == transaction.id for t in transactions):
            raise DuplicateError(f"Transaction already exists: {transaction.id}")
        transactions.append(transaction)
        self._save(transactions)
        return True

    async def remove_transaction(self, transaction_id: str) -> bool:
        transactions = self._load()
        remaining = [t for t in transactions if t.id != transaction_id]
        if len(remaining) == len(transactions):
            return False
        self._save(remaining)
        return True

    async def clear(self) -> int:
        removed = len(self._load())
        self._save([])
        return removed


class JsonFileNotificationStorage(NotificationStorageInterface):
    """Notification inbox persisted as a JSON list, oldest first on disk."""

    def __init__(self, path: Path):
        self._file = JsonFile(path, default=[])

    def _load(self) -> list[Notification]:
        try:
            return [Notification.model_validate(r) for r in self._file.load()]
        except (ValidationError, TypeError) as e:
            raise StorageError(f"Invalid notifications file: {e}") from e

    def _save(self, notifications: list[Notification]) -> None:
        self._file.save([n.model_dump(mode="json") for n in notifications])

    async def save_notification(self, notification: Notification) -> bool:
        notifications = [n for n in self._load() if n.id != notification.id]
        notifications.append(notification)
        self._save(notifications)
        return True

    async def list_notifications(self, limit: int = 100) -> list[Notification]:
        notifications = self._load()
        notifications.reverse()
        notifications.sort(key=lambda n: n.created_at, reverse=True)
        return notifications[:limit]

    async def mark_as_read(self, notification_id: UUID) -> bool:
        notifications = self._load()
        for idx, notification in enumerate(notifications):
            if notification.id == notification_id:
                notifications[idx] = notification.model_copy(update={"is_read": True})
                self._save(notifications)
                return True
        raise NotFoundError(f"Notification not found: {notification_id}")

    async def mark_all_as_read(self) -> int:
        notifications = self._load()
        changed = sum(1 for n in notifications if not n.is_read)
        if changed:
            self._save([n.model_copy(update={"is_read": True}) for n in notifications])
        return changed

    async def delete_notification(self, notification_id: UUID) -> bool:
        notifications = self._load()
        remaining = [n for n in notifications if n.id != notification_id]
        if len(remaining) == len(notifications):
            return False
        self._save(remaining)
        return True


class JsonFilePreferenceStorage(PreferenceStorageInterface):

    def __init__(self, path: Path):
        self._file = JsonFile(path, default={})

    async def load_preferences(self) -> Optional[NotificationPreferences]:
        data = self._file.load()
        if not data:
            return None
        try:
            return NotificationPreferences.model_validate(data)
        except ValidationError as e:
            raise StorageError(f"Invalid preferences file: {e}") from e

    async def save_preferences(self, preferences: NotificationPreferences) -> bool:
        self._file.save(preferences.model_dump(mode="json"))
        return True
