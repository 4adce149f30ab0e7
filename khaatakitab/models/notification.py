"""
Notification Models

Notifications are the persistent, user-visible side of the system:
transaction confirmations, pushed insights and reminders. Unlike alerts
they are stored, can be read/unread, and may go out by SMS.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from khaatakitab.models.alert import AlertPriority


class NotificationType(str, Enum):
    """Notification categories the user can toggle individually."""
    INCOME = "income"
    EXPENSE = "expense"
    INSIGHT = "insight"
    REMINDER = "reminder"


NOTIFICATION_ICONS: dict[NotificationType, str] = {
    NotificationType.INCOME: "💰",
    NotificationType.EXPENSE: "⚠️",
    NotificationType.INSIGHT: "📊",
    NotificationType.REMINDER: "🔔",
}


class NotificationPayload(BaseModel):
    """What a caller hands to the notification service."""
    model_config = ConfigDict(str_strip_whitespace=True)

    type: NotificationType
    title: str = Field(..., min_length=1, max_length=100)
    message: str = Field(..., min_length=1, max_length=500)
    category: Optional[str] = None
    amount: Optional[Decimal] = Field(default=None, ge=0)
    priority: AlertPriority = AlertPriority.MEDIUM
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def icon(self) -> str:
        return NOTIFICATION_ICONS[self.type]

    def sms_text(self) -> str:
        return f"{self.title}: {self.message}"


class Notification(NotificationPayload):
    """A stored notification in the user's inbox."""

    id: UUID = Field(default_factory=uuid4)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    is_read: bool = False

    @classmethod
    def from_payload(cls, payload: NotificationPayload) -> "Notification":
        return cls(**payload.model_dump())


class NotificationPreferences(BaseModel):
    """
    Per-user delivery preferences.

    The expense threshold suppresses expense notifications for small
    amounts; it has no effect on the alert engine.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    app_notifications_enabled: bool = True
    sms_alerts_enabled: bool = False
    phone_number: Optional[str] = Field(default=None, max_length=20)
    notify_on_income: bool = True
    notify_on_expense: bool = True
    notify_on_insights: bool = True
    notify_on_reminders: bool = True
    expense_threshold: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Only notify for expenses above this amount"
    )
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @field_validator('phone_number')
    @classmethod
    def validate_phone_number(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return None
        digits = v.replace(" ", "").replace("-", "")
        if not digits.lstrip("+").isdigit() or len(digits.lstrip("+")) < 10:
            raise ValueError(f"Invalid phone number: {v}")
        return digits

    def allows(self, notification_type: NotificationType) -> bool:
        """Is this notification type switched on?"""
        return {
            NotificationType.INCOME: self.notify_on_income,
            NotificationType.EXPENSE: self.notify_on_expense,
            NotificationType.INSIGHT: self.notify_on_insights,
            NotificationType.REMINDER: self.notify_on_reminders,
        }[notification_type]

    @property
    def can_send_sms(self) -> bool:
        return self.sms_alerts_enabled and bool(self.phone_number)


class DeliveryReport(BaseModel):
    """What happened to one dispatched notification."""

    notification_id: Optional[UUID] = None
    suppressed: bool = False
    suppressed_reason: Optional[str] = None
    displayed: bool = False
    stored: bool = False
    sms_queued: bool = False
    errors: list[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors
