"""
Alert Models

Alerts are derived, never stored: the engine recomputes them from the
ledger on every read. They only become persistent if they are pushed
through the notification side-channel.

DESIGN DECISION: Alert kinds and priorities are closed enums with explicit
presentation tables. Adding a new kind without a table entry is caught by
the tests instead of falling through to a default branch at render time.
"""

from enum import Enum

from pydantic import BaseModel, Field


class AlertType(str, Enum):
    """Kind of alert, drives icon and colour."""
    WARNING = "warning"
    DANGER = "danger"
    INFO = "info"
    SUCCESS = "success"


class AlertPriority(str, Enum):
    """How urgently the user should look at an alert."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Alert(BaseModel):
    """A single rule-triggered advisory message."""

    id: int = Field(..., ge=1, description="Position in the emitted list, 1-based")
    type: AlertType
    title: str = Field(..., min_length=1, max_length=100)
    message: str = Field(..., min_length=1, max_length=500)
    date: str = Field(
        default="Today",
        description="Relative date label shown under the message"
    )
    priority: AlertPriority


class AlertPresentation(BaseModel):
    """Visual attributes for one alert type."""

    icon: str
    color: str
    label: str


ALERT_PRESENTATION: dict[AlertType, AlertPresentation] = {
    AlertType.WARNING: AlertPresentation(icon="⚠️", color="orange", label="Warning"),
    AlertType.DANGER: AlertPresentation(icon="📉", color="red", label="Danger"),
    AlertType.INFO: AlertPresentation(icon="💡", color="blue", label="Tip"),
    AlertType.SUCCESS: AlertPresentation(icon="✅", color="green", label="Good news"),
}

# Badge variants understood by the front end
PRIORITY_BADGE_VARIANT: dict[AlertPriority, str] = {
    AlertPriority.HIGH: "destructive",
    AlertPriority.MEDIUM: "default",
    AlertPriority.LOW: "secondary",
}


def presentation_for(alert_type: AlertType) -> AlertPresentation:
    """Look up the presentation for an alert type."""
    return ALERT_PRESENTATION[alert_type]


def badge_variant_for(priority: AlertPriority) -> str:
    """Look up the badge variant for a priority."""
    return PRIORITY_BADGE_VARIANT[priority]
