"""Email adapters."""

from .base import MailTransport, OutgoingEmail
from .resend_adapter import ResendMailTransport, get_mail_transport, mail_transport

__all__ = [
    "MailTransport",
    "OutgoingEmail",
    "ResendMailTransport",
    "get_mail_transport",
    "mail_transport",
]
