"""
Mail transport interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class OutgoingEmail:
    """A single message handed to the transport."""

    to: str
    from_email: str
    subject: str
    text: str
    html: str


class MailTransport(ABC):
    """Abstract mail transport."""

    @abstractmethod
    async def send(self, message: OutgoingEmail) -> None:
        """
        Deliver one message.

        Raises:
            UpstreamDeliveryError: if the provider rejects the message
        """
        pass
