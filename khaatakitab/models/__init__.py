"""
Data Models Package

This package contains all Pydantic models used in KhaataKitab.
All data flowing through the system must conform to these schemas.
"""

from khaatakitab.models.alert import (
    ALERT_PRESENTATION,
    PRIORITY_BADGE_VARIANT,
    Alert,
    AlertPresentation,
    AlertPriority,
    AlertType,
    badge_variant_for,
    presentation_for,
)
from khaatakitab.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from khaatakitab.models.credit import (
    CreditFactor,
    CreditProfile,
    CreditRating,
)
from khaatakitab.models.ledger import (
    DashboardSummary,
    LedgerSnapshot,
    MonthlyBucket,
    Prediction,
    Transaction,
    TransactionInput,
    TransactionType,
    ValidationIssue,
    ValidationResult,
)
from khaatakitab.models.notification import (
    NOTIFICATION_ICONS,
    DeliveryReport,
    Notification,
    NotificationPayload,
    NotificationPreferences,
    NotificationType,
)

__all__ = [
    # Ledger models
    "DashboardSummary",
    "LedgerSnapshot",
    "MonthlyBucket",
    "Prediction",
    "Transaction",
    "TransactionInput",
    "TransactionType",
    "ValidationIssue",
    "ValidationResult",
    # Alert models
    "ALERT_PRESENTATION",
    "PRIORITY_BADGE_VARIANT",
    "Alert",
    "AlertPresentation",
    "AlertPriority",
    "AlertType",
    "badge_variant_for",
    "presentation_for",
    # Notification models
    "NOTIFICATION_ICONS",
    "DeliveryReport",
    "Notification",
    "NotificationPayload",
    "NotificationPreferences",
    "NotificationType",
    # Credit models
    "CreditFactor",
    "CreditProfile",
    "CreditRating",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
