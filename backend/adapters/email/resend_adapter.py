"""
Resend email service adapter.
"""

import asyncio
import logging
from typing import Optional

import resend

from adapters.email.base import MailTransport, OutgoingEmail
from core.errors import UpstreamDeliveryError
from infrastructure.config.settings import settings

logger = logging.getLogger(__name__)


class ResendMailTransport(MailTransport):
    """Mail transport using the Resend API.

    Without an API key the transport runs in development mode: messages are
    logged instead of sent and every send succeeds.
    """

    def __init__(self, api_key: Optional[str] = None):
        self._api_key = api_key if api_key is not None else settings.resend_api_key
        if self._api_key:
            resend.api_key = self._api_key

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def send(self, message: OutgoingEmail) -> None:
        """
        Send one email through Resend.

        The Resend SDK is synchronous, so the call runs in a worker thread to
        keep concurrent sends overlapping.

        Raises:
            UpstreamDeliveryError: if Resend rejects the message
        """
        if not self.is_configured:
            logger.info(
                "[DEV] Email to %s: %s",
                message.to,
                message.subject,
                extra={"recipient": message.to, "outcome": "logged"},
            )
            return

        params = {
            "from": message.from_email,
            "to": [message.to],
            "subject": message.subject,
            "text": message.text,
            "html": message.html,
        }

        try:
            await asyncio.to_thread(resend.Emails.send, params)
        except Exception as e:
            raise UpstreamDeliveryError(message.to, str(e)[:200]) from e


# Singleton instance
mail_transport = ResendMailTransport()


def get_mail_transport() -> MailTransport:
    """FastAPI dependency returning the process-wide mail transport."""
    return mail_transport
