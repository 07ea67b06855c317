"""
Newsletter fan-out.

When content is published, every subscriber whose categories include the
content kind (or ``all``) gets one email. Sends run concurrently and each
one is isolated: a rejected address is logged and the rest still go out.
Nothing is retried.
"""

import asyncio
import logging
from collections.abc import Iterable
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from adapters.email import MailTransport, OutgoingEmail, get_mail_transport
from core.domain import ALL_CATEGORIES, ContentItem, ContentKind, DispatchOutcome, FanOutReport, Subscriber
from infrastructure.config.settings import settings
from infrastructure.database.connection import async_session_maker
from infrastructure.database.models import NewsletterSubscription
from services.newsletter_renderer import NewsletterTemplate, render_newsletter

logger = logging.getLogger(__name__)


def _tag(kind: ContentKind | str) -> str:
    return kind.value if isinstance(kind, ContentKind) else str(kind)


def select_recipients(kind: ContentKind | str, subscribers: Iterable[Subscriber]) -> list[Subscriber]:
    """
    Keep subscribers whose categories contain the kind tag or ``all``.

    Matching is exact and case-sensitive.
    """
    tag = _tag(kind)
    return [
        s for s in subscribers
        if s.subscribed and (tag in s.categories or ALL_CATEGORIES in s.categories)
    ]


async def load_subscribed(db: AsyncSession) -> list[Subscriber]:
    """Read every currently subscribed row."""
    result = await db.execute(
        select(NewsletterSubscription).where(NewsletterSubscription.subscribed.is_(True))
    )
    return [Subscriber.from_model(row) for row in result.scalars().all()]


class NewsletterDispatcher:
    """Renders a newsletter once and delivers it to every matching subscriber."""

    def __init__(
        self,
        transport: MailTransport,
        *,
        from_email: Optional[str] = None,
        frontend_url: Optional[str] = None,
        log: Optional[logging.Logger] = None,
    ):
        self.transport = transport
        self.from_email = from_email or settings.smtp_from
        self.frontend_url = frontend_url or settings.frontend_url
        self.log = log or logger

    async def fan_out(
        self,
        kind: ContentKind | str,
        item: ContentItem,
        subscribers: Iterable[Subscriber],
    ) -> FanOutReport:
        """
        Send the announcement for *item* to the matching subscribers.

        Returns once every attempt has settled; never raises for a
        per-recipient failure.
        """
        recipients = select_recipients(kind, subscribers)
        report = FanOutReport(kind=kind, content_id=item.id, matched=len(recipients))

        if not recipients:
            self.log.info(
                "No subscribers for %s newsletter",
                _tag(kind),
                extra={"content_kind": _tag(kind), "content_id": item.id, "matched": 0},
            )
            return report

        template = render_newsletter(kind, item, self.frontend_url)
        outcomes = await asyncio.gather(
            *(self._deliver(kind, item, template, r) for r in recipients)
        )
        report.outcomes.extend(outcomes)

        self.log.info(
            "Newsletter for %s %s: %d sent, %d failed",
            _tag(kind),
            item.id,
            report.sent,
            report.failed,
            extra={
                "content_kind": _tag(kind),
                "content_id": item.id,
                "matched": report.matched,
                "sent": report.sent,
                "failed": report.failed,
            },
        )
        return report

    async def _deliver(
        self,
        kind: ContentKind | str,
        item: ContentItem,
        template: NewsletterTemplate,
        recipient: Subscriber,
    ) -> DispatchOutcome:
        message = template.personalize(recipient.unsubscribe_token)
        try:
            await self.transport.send(
                OutgoingEmail(
                    to=recipient.email,
                    from_email=self.from_email,
                    subject=message.subject,
                    text=message.text,
                    html=message.html,
                )
            )
        except Exception as e:
            reason = getattr(e, "reason", None) or str(e) or e.__class__.__name__
            self.log.error(
                "Newsletter delivery failed for %s",
                recipient.email,
                extra={
                    "recipient": recipient.email,
                    "content_kind": _tag(kind),
                    "content_id": item.id,
                    "outcome": "failed",
                    "reason": reason,
                },
            )
            return DispatchOutcome(recipient=recipient.email, delivered=False, reason=reason)

        return DispatchOutcome(recipient=recipient.email, delivered=True)


async def send_newsletter(
    kind: ContentKind | str,
    item: ContentItem,
    *,
    dispatcher: Optional[NewsletterDispatcher] = None,
    session_factory: Optional[async_sessionmaker] = None,
) -> FanOutReport:
    """
    Background entry point: load subscribers in a dedicated session, then
    fan out.

    The request session is closed by the time this runs, so it opens its
    own. Errors loading subscribers propagate to the task queue.
    """
    factory = session_factory or async_session_maker
    async with factory() as db:
        subscribers = await load_subscribed(db)

    dispatcher = dispatcher or NewsletterDispatcher(get_mail_transport())
    return await dispatcher.fan_out(kind, item, subscribers)
