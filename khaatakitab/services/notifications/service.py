"""
Notification Delivery

DESIGN DECISION: Delivery is fire-and-forget. dispatch() never raises:
a broken toast, inbox or SMS gateway is logged and audited, and the
ledger change that triggered the notification stands regardless.

Order of operations for one payload:
1. Load preferences and decide whether to suppress
2. Show in-app (if app notifications are on)
3. Store in the inbox
4. Queue SMS (if enabled and a phone number is set)

SMS goes out on a background worker thread. dispatch() returns as soon
as the message is queued; a failed send is logged and audited from the
worker.
"""

import asyncio
from concurrent.futures import Executor, Future, ThreadPoolExecutor, wait
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional
from uuid import UUID

import structlog

from khaatakitab.models.notification import (
    DeliveryReport,
    Notification,
    NotificationPayload,
    NotificationPreferences,
    NotificationType,
)
from khaatakitab.services.notifications.sinks import NotificationSink
from khaatakitab.services.notifications.sms import SmsGatewayClient
from khaatakitab.services.storage import (
    NotificationStorageInterface,
    PreferenceStorageInterface,
)

if TYPE_CHECKING:
    from khaatakitab.audit import AuditLogger


logger = structlog.get_logger(__name__)


class PreferenceService:
    """Loads and updates the user's notification preferences."""

    def __init__(
        self,
        storage: PreferenceStorageInterface,
        audit_logger: Optional["AuditLogger"] = None,
    ):
        self._storage = storage
        self._audit_logger = audit_logger

    async def get(self) -> NotificationPreferences:
        """
        Return stored preferences, creating the defaults on first use.
        """
        preferences = await self._storage.load_preferences()
        if preferences is None:
            preferences = NotificationPreferences()
            await self._storage.save_preferences(preferences)
        return preferences

    async def update(self, **changes: Any) -> NotificationPreferences:
        """
        Apply and persist a partial update.

        Raises:
            ValueError: On unknown fields or invalid values
        """
        unknown = set(changes) - set(NotificationPreferences.model_fields)
        if unknown:
            raise ValueError(f"Unknown preference fields: {sorted(unknown)}")

        current = await self.get()
        merged = {**current.model_dump(), **changes, "updated_at": datetime.utcnow()}
        updated = NotificationPreferences.model_validate(merged)
        await self._storage.save_preferences(updated)

        if self._audit_logger:
            changed = sorted(
                name for name in changes
                if getattr(current, name) != getattr(updated, name)
            )
            await self._audit_logger.log_preferences_updated(changed_fields=changed)

        return updated


class NotificationService:
    """
    Sends notifications to the user through every enabled channel and
    manages the inbox.
    """

    def __init__(
        self,
        storage: NotificationStorageInterface,
        preferences: PreferenceService,
        sink: Optional[NotificationSink] = None,
        sms_client: Optional[SmsGatewayClient] = None,
        audit_logger: Optional["AuditLogger"] = None,
        sms_executor: Optional[Executor] = None,
    ):
        self._storage = storage
        self._preferences = preferences
        self._sink = sink
        self._sms_client = sms_client
        self._audit_logger = audit_logger
        self._sms_executor = sms_executor
        self._pending_sms: list[Future] = []

    @staticmethod
    def suppression_reason(
        payload: NotificationPayload,
        preferences: NotificationPreferences,
    ) -> Optional[str]:
        """
        Why this payload should not be delivered, or None to deliver it.
        """
        if not preferences.allows(payload.type):
            return f"{payload.type.value} notifications are turned off"

        if (
            payload.type == NotificationType.EXPENSE
            and preferences.expense_threshold is not None
            and payload.amount is not None
            and payload.amount <= preferences.expense_threshold
        ):
            return (
                f"expense {payload.amount} is not above the "
                f"threshold {preferences.expense_threshold}"
            )

        return None

    async def _record_failure(
        self,
        report: DeliveryReport,
        channel: str,
        error: Exception,
        correlation_id: Optional[UUID],
    ) -> None:
        message = f"{channel}: {error}"
        report.errors.append(message)
        logger.warning("notification_channel_failed", channel=channel, error=str(error))
        if self._audit_logger:
            await self._audit_logger.log_notification_failed(
                channel=channel,
                error_message=str(error),
                correlation_id=correlation_id,
            )

    # -------------------------------------------------------------------------
    # SMS (background)
    # -------------------------------------------------------------------------

    def _queue_sms(
        self,
        phone_number: str,
        message: str,
        correlation_id: Optional[UUID],
    ) -> Future:
        """
        Hand one SMS to the worker pool and return without waiting.

        The pool outlives the event loop that queued the message, so a
        caller that closes its loop straight away still gets the SMS sent.
        """
        if self._sms_executor is None:
            self._sms_executor = ThreadPoolExecutor(
                max_workers=2,
                thread_name_prefix="sms",
            )

        self._pending_sms = [f for f in self._pending_sms if not f.done()]
        future = self._sms_executor.submit(
            self._deliver_sms,
            phone_number,
            message,
            correlation_id,
        )
        self._pending_sms.append(future)
        return future

    def _deliver_sms(
        self,
        phone_number: str,
        message: str,
        correlation_id: Optional[UUID],
    ) -> bool:
        """Runs on a worker thread. Never raises."""
        try:
            return self._sms_client.send_sms(phone_number, message)
        except Exception as e:
            logger.warning("notification_channel_failed", channel="sms", error=str(e))
            if self._audit_logger:
                # No event loop runs on this thread
                asyncio.run(self._audit_logger.log_notification_failed(
                    channel="sms",
                    error_message=str(e),
                    correlation_id=correlation_id,
                ))
            return False

    def wait_for_sms(self, timeout: Optional[float] = None) -> list[bool]:
        """
        Block until queued SMS deliveries finish.

        Returns:
            One result per finished delivery, True where the gateway
            accepted the message
        """
        pending = list(self._pending_sms)
        done, _ = wait(pending, timeout=timeout)
        self._pending_sms = [f for f in self._pending_sms if f not in done]
        return [f.result() for f in pending if f in done]

    async def dispatch(
        self,
        payload: NotificationPayload,
        correlation_id: Optional[UUID] = None,
    ) -> DeliveryReport:
        """
        Deliver a notification. Never raises.

        Returns:
            DeliveryReport describing which channels succeeded. SMS is
            only reported as queued; see wait_for_sms()
        """
        report = DeliveryReport()

        try:
            preferences = await self._preferences.get()
        except Exception as e:
            # Fall back to defaults rather than dropping the notification
            await self._record_failure(report, "preferences", e, correlation_id)
            preferences = NotificationPreferences()

        reason = self.suppression_reason(payload, preferences)
        if reason:
            report.suppressed = True
            report.suppressed_reason = reason
            if self._audit_logger:
                await self._audit_logger.log_notification_suppressed(
                    notification_type=payload.type.value,
                    reason=reason,
                    correlation_id=correlation_id,
                )
            return report

        notification = Notification.from_payload(payload)
        report.notification_id = notification.id

        if preferences.app_notifications_enabled and self._sink is not None:
            try:
                self._sink.display(payload)
                report.displayed = True
            except Exception as e:
                await self._record_failure(report, "in_app", e, correlation_id)

        try:
            report.stored = await self._storage.save_notification(notification)
        except Exception as e:
            await self._record_failure(report, "inbox", e, correlation_id)

        if preferences.can_send_sms and self._sms_client is not None:
            try:
                self._queue_sms(preferences.phone_number, payload.sms_text(), correlation_id)
                report.sms_queued = True
            except Exception as e:
                await self._record_failure(report, "sms", e, correlation_id)

        if self._audit_logger:
            channels = [
                name for name, done in (
                    ("in_app", report.displayed),
                    ("inbox", report.stored),
                    ("sms", report.sms_queued),
                ) if done
            ]
            await self._audit_logger.log_notification_sent(
                notification_id=notification.id,
                notification_type=payload.type.value,
                channels=channels,
                correlation_id=correlation_id,
            )

        return report

    # -------------------------------------------------------------------------
    # Inbox
    # -------------------------------------------------------------------------

    async def list_inbox(self, limit: int = 100) -> list[Notification]:
        return await self._storage.list_notifications(limit=limit)

    async def unread_count(self) -> int:
        notifications = await self._storage.list_notifications(limit=10_000)
        return sum(1 for n in notifications if not n.is_read)

    async def mark_as_read(self, notification_id: UUID) -> bool:
        return await self._storage.mark_as_read(notification_id)

    async def mark_all_as_read(self) -> int:
        return await self._storage.mark_all_as_read()

    async def delete(self, notification_id: UUID) -> bool:
        return await self._storage.delete_notification(notification_id)
