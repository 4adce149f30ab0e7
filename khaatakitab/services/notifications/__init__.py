"""Notification delivery: preferences, in-app sinks, inbox and SMS."""

from khaatakitab.services.notifications.service import (
    NotificationService,
    PreferenceService,
)
from khaatakitab.services.notifications.sinks import (
    NotificationSink,
    ToastQueueSink,
)
from khaatakitab.services.notifications.sms import (
    NotificationError,
    SmsDeliveryError,
    SmsGatewayClient,
)

__all__ = [
    "NotificationError",
    "NotificationService",
    "NotificationSink",
    "PreferenceService",
    "SmsDeliveryError",
    "SmsGatewayClient",
    "ToastQueueSink",
]
