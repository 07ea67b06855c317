"""
Visitor analytics model.
"""

from datetime import datetime
from typing import Optional
from uuid import uuid4

from sqlalchemy import JSON, DateTime, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class Visitor(Base, TimestampMixin):
    """A browser identified by the client-side visitor cookie."""

    __tablename__ = "visitors"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    visitor_id: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    session_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    ip_address: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    referrer: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    landing_page: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    browser: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    device: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    os: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    visit_count: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    first_visit: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    last_visit: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )
    page_views: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    """
    Structure:
    [
        {"path": "/blog", "title": "Blog", "timestamp": "2025-01-15T12:00:00Z"},
        ...
    ]
    """

    def __repr__(self) -> str:
        return f"<Visitor(id={self.id}, visitor_id={self.visitor_id}, visits={self.visit_count})>"
