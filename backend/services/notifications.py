"""
Transactional notification emails.

Every email is its own background task, so one failed send never affects
the others or the request that caused them.
"""

import logging
from typing import Optional

from adapters.email import MailTransport, OutgoingEmail, get_mail_transport
from services.task_queue import TaskQueue, task_queue

logger = logging.getLogger(__name__)


class NotificationService:
    """Queues transactional emails on the task queue."""

    def __init__(
        self,
        queue: TaskQueue,
        transport: MailTransport,
        log: Optional[logging.Logger] = None,
    ):
        self.queue = queue
        self.transport = transport
        self.log = log or logger

    async def send_now(self, message: OutgoingEmail, topic: str) -> bool:
        """Send a single email, logging instead of raising on failure."""
        try:
            await self.transport.send(message)
        except Exception as e:
            self.log.error(
                "Failed to send %s email to %s: %s",
                topic,
                message.to,
                e,
                extra={"recipient": message.to, "outcome": "failed", "reason": str(e)},
            )
            return False

        self.log.info(
            "Sent %s email to %s",
            topic,
            message.to,
            extra={"recipient": message.to, "outcome": "sent"},
        )
        return True

    async def queue_emails(self, topic: str, *messages: OutgoingEmail) -> list[str]:
        """Enqueue each message as an independent task. Returns the task ids."""
        task_ids = []
        for message in messages:
            task_ids.append(await self.queue.enqueue(None, self.send_now(message, topic)))
        return task_ids


def get_notification_service() -> NotificationService:
    """FastAPI dependency."""
    return NotificationService(task_queue, get_mail_transport())
