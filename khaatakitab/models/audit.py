"""
Audit Models for KhaataKitab

Every ledger mutation and every notification attempt is logged for audit
purposes. This provides:
1. Complete traceability of all operations
2. Debugging information when things go wrong
3. Ability to reconstruct history

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

import json
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.
    """
    # Ledger
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_REJECTED = "transaction_rejected"
    TRANSACTION_DELETED = "transaction_deleted"
    LEDGER_CLEARED = "ledger_cleared"
    LEDGER_UNAVAILABLE = "ledger_unavailable"

    # Analytics
    ALERTS_GENERATED = "alerts_generated"

    # Notifications
    NOTIFICATION_SENT = "notification_sent"
    NOTIFICATION_SUPPRESSED = "notification_suppressed"
    NOTIFICATION_FAILED = "notification_failed"
    SMS_FAILED = "sms_failed"

    # Preferences
    PREFERENCES_UPDATED = "preferences_updated"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'notification')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one transaction and its notification)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }

    def to_record(self) -> dict:
        """Flat, JSON-safe record for file-backed audit storage."""
        record = self.to_log_dict()
        record["details"] = json.dumps(self.details, default=str) if self.details else ""
        return record


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_added(tx_id, "expense", "500.00", correlation_id)
    """

    @staticmethod
    def transaction_added(
        transaction_id: str,
        transaction_type: str,
        amount: str,
        category: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Transaction added: ₹{amount} {transaction_type} ({category})",
            details={
                "type": transaction_type,
                "amount": amount,
                "category": category,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_rejected(
        issues: list[dict],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="transaction",
            correlation_id=correlation_id,
            description=f"Transaction rejected with {len(issues)} issues",
            details={
                "issues": issues,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_deleted(
        transaction_id: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description="Transaction deleted",
            is_user_action=True,
        )

    @staticmethod
    def ledger_cleared(
        removed_count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_CLEARED,
            severity=AuditSeverity.WARNING,
            entity_type="ledger",
            correlation_id=correlation_id,
            description=f"Ledger reset, {removed_count} transactions removed",
            details={
                "removed_count": removed_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def ledger_unavailable(
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_UNAVAILABLE,
            severity=AuditSeverity.ERROR,
            entity_type="ledger",
            correlation_id=correlation_id,
            description=f"Ledger unavailable during {operation}",
            error_message=error_message,
            details={
                "operation": operation,
            },
        )

    @staticmethod
    def alerts_generated(
        alert_types: list[str],
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ALERTS_GENERATED,
            severity=AuditSeverity.DEBUG,
            entity_type="alert",
            correlation_id=correlation_id,
            description=f"{len(alert_types)} alerts generated",
            details={
                "alert_types": alert_types,
            },
        )

    @staticmethod
    def notification_sent(
        notification_id: Optional[UUID],
        notification_type: str,
        channels: list[str],
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.NOTIFICATION_SENT,
            entity_type="notification",
            entity_id=str(notification_id) if notification_id else None,
            correlation_id=correlation_id,
            description=f"{notification_type.capitalize()} notification sent via {', '.join(channels) or 'nothing'}",
            details={
                "type": notification_type,
                "channels": channels,
            },
        )

    @staticmethod
    def notification_suppressed(
        notification_type: str,
        reason: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.NOTIFICATION_SUPPRESSED,
            severity=AuditSeverity.DEBUG,
            entity_type="notification",
            correlation_id=correlation_id,
            description=f"{notification_type.capitalize()} notification suppressed",
            details={
                "type": notification_type,
                "reason": reason,
            },
        )

    @staticmethod
    def notification_failed(
        channel: str,
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=(
                AuditEventType.SMS_FAILED
                if channel == "sms"
                else AuditEventType.NOTIFICATION_FAILED
            ),
            severity=AuditSeverity.ERROR,
            entity_type="notification",
            correlation_id=correlation_id,
            description=f"Notification delivery failed: {channel}",
            error_message=error_message,
            details={
                "channel": channel,
            },
        )

    @staticmethod
    def preferences_updated(
        changed_fields: list[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PREFERENCES_UPDATED,
            entity_type="preferences",
            description="Notification preferences updated",
            details={
                "changed_fields": changed_fields,
            },
            is_user_action=True,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
