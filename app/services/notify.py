"""
Transient user-facing notifications (toasts).

Controllers push into a NotificationQueue; the page drains it on render so
each toast is shown once.
"""
from dataclasses import dataclass
from typing import Literal, Protocol

Severity = Literal["default", "destructive", "warning"]


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    severity: Severity = "default"


class Notifier(Protocol):
    def notify(self, notification: Notification) -> None: ...


class NotificationQueue:
    def __init__(self):
        self._pending: list[Notification] = []

    def notify(self, notification: Notification) -> None:
        self._pending.append(notification)

    def drain(self) -> list[Notification]:
        """Return pending notifications oldest first and forget them."""
        pending, self._pending = self._pending, []
        return pending

    def __len__(self) -> int:
        return len(self._pending)
