"""
Newsletter subscription store.

One row per email. Subscribing again refreshes name and categories and
re-enables delivery; unsubscribing only flips the flag so the token stays
valid.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from adapters.email.templates import welcome_email
from core.errors import NotFoundError, ValidationError
from infrastructure.database.models import NewsletterSubscription
from services.notifications import NotificationService

logger = logging.getLogger(__name__)


class SubscriptionService:
    """Create, refresh and cancel newsletter subscriptions."""

    def __init__(self, db: AsyncSession, notifications: Optional[NotificationService] = None):
        self.db = db
        self.notifications = notifications

    async def get_by_email(self, email: str) -> Optional[NewsletterSubscription]:
        result = await self.db.execute(
            select(NewsletterSubscription).where(NewsletterSubscription.email == email)
        )
        return result.scalar_one_or_none()

    async def subscribe(
        self,
        name: str,
        email: str,
        categories: Optional[list[str]] = None,
    ) -> tuple[NewsletterSubscription, bool]:
        """
        Create or refresh the subscription for *email*.

        Returns:
            Tuple of (subscription, created)

        Raises:
            ValidationError: name or email is blank
        """
        name = (name or "").strip()
        email = (email or "").strip()
        if not name or not email:
            raise ValidationError("Name and email are required")
        categories = list(categories or [])

        existing = await self.get_by_email(email)
        if existing is not None:
            return await self._refresh(existing, name, categories), False

        subscription = NewsletterSubscription(name=name, email=email, categories=categories, subscribed=True)
        self.db.add(subscription)
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent subscribe for the same address
            await self.db.rollback()
            existing = await self.get_by_email(email)
            if existing is None:
                raise
            return await self._refresh(existing, name, categories), False

        await self.db.refresh(subscription)
        logger.info("New newsletter subscription %s", subscription.id)

        if self.notifications is not None:
            await self.notifications.queue_emails("welcome", welcome_email(email, name, categories))

        return subscription, True

    async def _refresh(
        self,
        subscription: NewsletterSubscription,
        name: str,
        categories: list[str],
    ) -> NewsletterSubscription:
        subscription.name = name
        subscription.categories = categories
        subscription.subscribed = True
        await self.db.commit()
        await self.db.refresh(subscription)
        logger.info("Refreshed newsletter subscription %s", subscription.id)
        return subscription

    async def unsubscribe(self, token: str) -> NewsletterSubscription:
        """
        Stop delivery for the subscription owning *token*.

        Raises:
            NotFoundError: no subscription has this token
        """
        result = await self.db.execute(
            select(NewsletterSubscription).where(NewsletterSubscription.unsubscribe_token == token)
        )
        subscription = result.scalar_one_or_none()
        if subscription is None:
            raise NotFoundError("Subscription not found")

        subscription.subscribed = False
        await self.db.commit()
        await self.db.refresh(subscription)
        logger.info("Newsletter subscription %s unsubscribed", subscription.id)
        return subscription
