"""
Content lifecycle hooks.

Routes call ``capture_previous_state`` before applying an update, commit,
then pass the captured snapshot to ``after_update``. Creates go straight to
``after_create``. When the publish detector fires, the newsletter fan-out is
queued as a background task so the HTTP response never waits on email.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any, Optional
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain import (
    PUBLICATION_SHAPES,
    ContentItem,
    ContentKind,
    Flag,
    PublicationState,
    Timestamp,
    publication_state_of,
)
from core.errors import TransitionLookupError
from infrastructure.database.models import Blog, Event, Job, Resource, Webinar
from services.newsletter import send_newsletter
from services.publish_detector import published_on_create, published_on_update
from services.task_queue import TaskQueue, task_queue

logger = logging.getLogger(__name__)

CONTENT_MODELS: dict[ContentKind, type] = {
    ContentKind.BLOG: Blog,
    ContentKind.WEBINAR: Webinar,
    ContentKind.EVENT: Event,
    ContentKind.CAREERS: Job,
    ContentKind.RESOURCE: Resource,
}

FanOut = Callable[[ContentKind, ContentItem], Awaitable[Any]]


class ContentLifecycle:
    """Publish detection plus newsletter scheduling for content mutations."""

    def __init__(
        self,
        queue: TaskQueue,
        fanout: FanOut = send_newsletter,
        log: Optional[logging.Logger] = None,
    ):
        self.queue = queue
        self.fanout = fanout
        self.log = log or logger

    async def capture_previous_state(
        self,
        db: AsyncSession,
        kind: ContentKind,
        entity_id: str,
    ) -> Optional[PublicationState]:
        """
        Re-read the persisted publication column before an update.

        Returns None when the entity is missing or the lookup fails; both
        count as "not previously published".
        """
        try:
            return await self._read_publication_state(db, kind, entity_id)
        except TransitionLookupError as e:
            self.log.warning(
                e.message,
                extra={"content_kind": kind.value, "content_id": entity_id, "reason": str(e.__cause__)},
            )
            return None

    async def _read_publication_state(
        self,
        db: AsyncSession,
        kind: ContentKind,
        entity_id: str,
    ) -> Optional[PublicationState]:
        model = CONTENT_MODELS[kind]
        is_flag = PUBLICATION_SHAPES[kind] is Flag
        column = model.published if is_flag else model.published_at

        try:
            result = await db.execute(select(column).where(model.id == entity_id))
            row = result.one_or_none()
        except SQLAlchemyError as e:
            # A failed statement poisons the transaction; reset it so the update can proceed
            await db.rollback()
            raise TransitionLookupError(
                f"Could not read publication state of {kind.value} {entity_id}: {e}"
            ) from e

        if row is None:
            return None
        if is_flag:
            return Flag(published=row[0] is True)
        return Timestamp(published_at=row[0])

    async def after_create(self, kind: ContentKind, entity: Any) -> bool:
        """Schedule a newsletter if the new entity is already published."""
        if not published_on_create(publication_state_of(kind, entity)):
            return False
        return await self._schedule(kind, entity)

    async def after_update(
        self,
        kind: ContentKind,
        entity: Any,
        previous: Optional[PublicationState],
        submitted: dict[str, Any],
    ) -> bool:
        """Schedule a newsletter if this update published the entity."""
        current = publication_state_of(kind, entity)
        if not published_on_update(kind, previous, current, submitted):
            return False
        return await self._schedule(kind, entity)

    async def _schedule(self, kind: ContentKind, entity: Any) -> bool:
        """Queue the fan-out. The mutation is already committed, so errors are only logged."""
        item = ContentItem.from_model(entity)
        task_id = f"newsletter-{kind.value}-{item.id}-{uuid4().hex[:8]}"
        try:
            await self.queue.enqueue(task_id, self.fanout(kind, item))
        except Exception as e:
            self.log.error(
                "Failed to queue newsletter for %s %s: %s",
                kind.value,
                item.id,
                e,
                exc_info=True,
                extra={"content_kind": kind.value, "content_id": item.id, "outcome": "failed"},
            )
            return False
        self.log.info(
            "Queued newsletter for published %s %s",
            kind.value,
            item.id,
            extra={"content_kind": kind.value, "content_id": item.id, "task_id": task_id},
        )
        return True


def get_content_lifecycle() -> ContentLifecycle:
    """FastAPI dependency."""
    return ContentLifecycle(task_queue)
