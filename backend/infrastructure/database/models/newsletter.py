"""
Newsletter subscription model.
"""

import secrets
from uuid import uuid4

from sqlalchemy import JSON, Boolean, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


def generate_unsubscribe_token() -> str:
    """Mint an opaque 64-character hex token."""
    return secrets.token_hex(32)


class NewsletterSubscription(Base, TimestampMixin):
    """
    One row per email address.

    Rows are never deleted: unsubscribing only clears ``subscribed`` so the
    token keeps resolving.
    """

    __tablename__ = "newsletter_subscriptions"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    categories: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    """
    Content kind tags, e.g. ["blog", "webinar"], or ["all"].
    """
    subscribed: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)
    unsubscribe_token: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        nullable=False,
        default=generate_unsubscribe_token,
    )

    def __repr__(self) -> str:
        return f"<NewsletterSubscription(id={self.id}, email={self.email}, subscribed={self.subscribed})>"
