"""
Visitor analytics: upsert-on-track and read helpers.
"""

import logging
from datetime import UTC, datetime
from typing import Any, Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request

from core.errors import NotFoundError, ValidationError
from infrastructure.database.models import Visitor

logger = logging.getLogger(__name__)

VISITOR_LIST_LIMIT = 100


def client_ip(request: Request) -> str:
    """First X-Forwarded-For hop, then X-Real-IP, then the socket peer."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    if request.client and request.client.host:
        return request.client.host
    return "Unknown"


class VisitorTracker:
    """Records visits keyed by the client-side visitor id."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def track(self, data: dict[str, Any], ip_address: str) -> tuple[Visitor, bool]:
        """
        Insert a new visitor or bump the visit count of a known one.

        Returns:
            Tuple of (visitor, created)
        """
        visitor_id = (data.get("visitor_id") or "").strip()
        if not visitor_id:
            raise ValidationError("visitor_id is required")

        now = datetime.now(UTC)
        if await self._exists(visitor_id):
            return await self._record_return(visitor_id, data, ip_address, now), False

        visitor = Visitor(
            visitor_id=visitor_id,
            session_id=data.get("session_id"),
            ip_address=ip_address,
            user_agent=data.get("user_agent"),
            referrer=data.get("referrer"),
            landing_page=data.get("landing_page"),
            browser=data.get("browser"),
            device=data.get("device"),
            os=data.get("os"),
            country=data.get("country"),
            city=data.get("city"),
            visit_count=1,
            first_visit=now,
            last_visit=now,
            page_views=data.get("page_views") or [],
        )
        self.db.add(visitor)
        try:
            await self.db.commit()
        except IntegrityError:
            # Another request created the same visitor first
            await self.db.rollback()
            return await self._record_return(visitor_id, data, ip_address, now), False

        await self.db.refresh(visitor)
        return visitor, True

    async def _exists(self, visitor_id: str) -> bool:
        result = await self.db.execute(select(Visitor.id).where(Visitor.visitor_id == visitor_id))
        return result.scalar_one_or_none() is not None

    async def _record_return(
        self,
        visitor_id: str,
        data: dict[str, Any],
        ip_address: str,
        now: datetime,
    ) -> Visitor:
        values: dict[str, Any] = {
            "visit_count": Visitor.visit_count + 1,
            "session_id": data.get("session_id"),
            "ip_address": ip_address,
            "last_visit": now,
        }
        if data.get("page_views"):
            values["page_views"] = data["page_views"]

        await self.db.execute(
            update(Visitor)
            .where(Visitor.visitor_id == visitor_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()

        result = await self.db.execute(
            select(Visitor)
            .where(Visitor.visitor_id == visitor_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()

    async def get_by_visitor_id(self, visitor_id: str) -> Visitor:
        result = await self.db.execute(select(Visitor).where(Visitor.visitor_id == visitor_id))
        visitor = result.scalar_one_or_none()
        if visitor is None:
            raise NotFoundError("Visitor not found")
        return visitor

    async def get(self, record_id: str) -> Visitor:
        visitor = await self.db.get(Visitor, record_id)
        if visitor is None:
            raise NotFoundError("Visitor not found")
        return visitor

    async def latest(self, limit: int = VISITOR_LIST_LIMIT) -> tuple[list[Visitor], int]:
        """Most recent visitors by last visit, plus the total count."""
        result = await self.db.execute(
            select(Visitor).order_by(Visitor.last_visit.desc()).limit(limit)
        )
        total = (await self.db.execute(select(func.count()).select_from(Visitor))).scalar() or 0
        return list(result.scalars().all()), total
