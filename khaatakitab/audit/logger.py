"""
Audit Logger

DESIGN DECISION: Every ledger mutation and every notification attempt is
logged. This provides:
1. Complete traceability
2. Debugging capability
3. A record of what the user was told and when

The audit logger:
- Is async to not block main flow
- Gracefully handles failures (doesn't crash the app if logging fails)
- Supports correlation IDs to trace related events
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from khaatakitab.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from khaatakitab.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage, when one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger(__name__)

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_transaction_added(
        self,
        transaction_id: str,
        transaction_type: str,
        amount: str,
        category: str,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.transaction_added(
            transaction_id=transaction_id,
            transaction_type=transaction_type,
            amount=amount,
            category=category,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_transaction_rejected(
        self,
        issues: list[dict],
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.transaction_rejected(
            issues=issues,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_transaction_deleted(
        self,
        transaction_id: str,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.transaction_deleted(
            transaction_id=transaction_id,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_ledger_cleared(
        self,
        removed_count: int,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.ledger_cleared(
            removed_count=removed_count,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_ledger_unavailable(
        self,
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.ledger_unavailable(
            operation=operation,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_alerts_generated(
        self,
        alert_types: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.alerts_generated(
            alert_types=alert_types,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_notification_sent(
        self,
        notification_id: Optional[UUID],
        notification_type: str,
        channels: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.notification_sent(
            notification_id=notification_id,
            notification_type=notification_type,
            channels=channels,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_notification_suppressed(
        self,
        notification_type: str,
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.notification_suppressed(
            notification_type=notification_type,
            reason=reason,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_notification_failed(
        self,
        channel: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.notification_failed(
            channel=channel,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_preferences_updated(
        self,
        changed_fields: list[str],
    ) -> None:
        event = AuditEventBuilder.preferences_updated(changed_fields=changed_fields)
        await self.log(event)

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        await self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., adding a transaction).
    Pass it through all subsequent operations.
    """
    return uuid4()
