"""
Visitor analytics schemas.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class TrackVisitRequest(BaseModel):
    """Payload sent by the site's analytics snippet on each visit."""

    visitor_id: str = Field(..., min_length=1, max_length=255)
    session_id: Optional[str] = Field(None, max_length=255)
    user_agent: Optional[str] = None
    referrer: Optional[str] = Field(None, max_length=1000)
    landing_page: Optional[str] = Field(None, max_length=1000)
    browser: Optional[str] = Field(None, max_length=100)
    device: Optional[str] = Field(None, max_length=100)
    os: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, max_length=100)
    city: Optional[str] = Field(None, max_length=100)
    page_views: Optional[list[dict[str, Any]]] = None


class VisitorResponse(BaseModel):
    id: str
    visitor_id: str
    session_id: Optional[str]
    ip_address: Optional[str]
    user_agent: Optional[str]
    referrer: Optional[str]
    landing_page: Optional[str]
    browser: Optional[str]
    device: Optional[str]
    os: Optional[str]
    country: Optional[str]
    city: Optional[str]
    visit_count: int
    first_visit: Optional[datetime]
    last_visit: Optional[datetime]
    page_views: list[dict[str, Any]]

    model_config = ConfigDict(from_attributes=True)


class VisitorEnvelope(BaseModel):
    success: bool = True
    data: VisitorResponse


class PaginationMeta(BaseModel):
    page: int
    page_size: int
    pages: int
    total: int


class VisitorListMeta(BaseModel):
    pagination: PaginationMeta


class VisitorListResponse(BaseModel):
    data: list[VisitorResponse]
    meta: VisitorListMeta
