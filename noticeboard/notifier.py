"""
Notification sinks.

The engine only decides what to announce; a sink decides how. Delivery is
fire-and-forget: a sink that fails (permission denied, service down) must
never take the poll loop down with it, so deliver() swallows and logs.
"""

from __future__ import annotations

import logging
from typing import Iterable, Protocol, Union

from .models import DueNotification

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    """Anything that can alert the user with a title and a body."""

    def notify(self, title: str, body: str) -> None: ...


class LogNotifier:
    """Logs every alert and keeps a record of what was sent."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []
        self.log = logging.getLogger(__name__)

    def notify(self, title: str, body: str) -> None:
        self.sent.append((title, body))
        self.log.info("%s — %s", title, body)


def deliver(
    sink: NotificationSink,
    notifications: Iterable[Union[DueNotification, tuple[str, str]]],
) -> int:
    """Send each notification to the sink; return how many were accepted."""
    delivered = 0
    for notification in notifications:
        if isinstance(notification, DueNotification):
            title, body = notification.title, notification.body
        else:
            title, body = notification
        try:
            sink.notify(title, body)
        except Exception as e:
            logger.warning("Notification %r not delivered: %s", title, e)
            continue
        delivered += 1
    return delivered
