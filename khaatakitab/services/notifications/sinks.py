"""
In-app notification sinks.

A sink only presents a notification; storing it and sending SMS are the
notification service's job.
"""

from abc import ABC, abstractmethod
from collections import deque

from khaatakitab.models.notification import NotificationPayload


class NotificationSink(ABC):
    """Something that can show a notification to the user right now."""

    @abstractmethod
    def display(self, payload: NotificationPayload) -> None:
        pass


class ToastQueueSink(NotificationSink):
    """
    Queues toasts for the front end.

    Streamlit can only draw during a script run, so notifications raised
    while handling an action are queued and drained on the next render.
    Oldest toasts are dropped once `max_pending` is reached.
    """

    def __init__(self, max_pending: int = 20):
        self._pending: deque[NotificationPayload] = deque(maxlen=max_pending)

    def display(self, payload: NotificationPayload) -> None:
        self._pending.append(payload)

    def drain(self) -> list[NotificationPayload]:
        pending = list(self._pending)
        self._pending.clear()
        return pending

    def __len__(self) -> int:
        return len(self._pending)
