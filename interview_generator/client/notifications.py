"""
One-shot user notifications.

Components emit a Notification once per terminal event (job completed, job
failed, export failed, checkout failed); a sink decides how to show it.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Literal, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    variant: Literal["default", "destructive"] = "default"
    retryable: bool = False

    @property
    def is_error(self) -> bool:
        return self.variant == "destructive"


class NotificationSink:
    """Base sink: receives each notification exactly once."""

    def notify(self, notification: Notification) -> None:
        raise NotImplementedError


class LoggingNotificationSink(NotificationSink):
    """Writes notifications to the log (default sink for headless use)."""

    def notify(self, notification: Notification) -> None:
        if notification.is_error:
            logger.error(f"{notification.title}: {notification.description}")
        else:
            logger.info(f"{notification.title}: {notification.description}")


class QueueNotificationSink(NotificationSink):
    """Pushes notifications onto an asyncio.Queue for a UI consumer to drain."""

    def __init__(self, queue: Optional[asyncio.Queue] = None):
        self.queue = queue if queue is not None else asyncio.Queue()

    def notify(self, notification: Notification) -> None:
        self.queue.put_nowait(notification)
