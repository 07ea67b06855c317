"""
Visitor analytics routes.
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.schemas.visitor import (
    PaginationMeta,
    TrackVisitRequest,
    VisitorEnvelope,
    VisitorListMeta,
    VisitorListResponse,
    VisitorResponse,
)
from api.utils import ensure_uuid, page_count
from infrastructure.database.connection import get_db
from services.visitor_tracking import VISITOR_LIST_LIMIT, VisitorTracker, client_ip

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/visitors", tags=["visitors"])


@router.post("/track", response_model=VisitorEnvelope)
async def track_visit(
    payload: TrackVisitRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    """Record a visit. Known visitors get their visit count bumped atomically."""
    visitor, created = await VisitorTracker(db).track(payload.model_dump(), client_ip(request))
    if created:
        logger.info("New visitor %s", visitor.visitor_id)
    return VisitorEnvelope(data=VisitorResponse.model_validate(visitor))


@router.get("/by-visitor-id/{visitor_id}", response_model=VisitorEnvelope)
async def get_by_visitor_id(visitor_id: str, db: AsyncSession = Depends(get_db)):
    visitor = await VisitorTracker(db).get_by_visitor_id(visitor_id)
    return VisitorEnvelope(data=VisitorResponse.model_validate(visitor))


@router.get("", response_model=VisitorListResponse)
async def list_visitors(db: AsyncSession = Depends(get_db)):
    """Latest visitors by last visit."""
    visitors, total = await VisitorTracker(db).latest()
    return VisitorListResponse(
        data=[VisitorResponse.model_validate(v) for v in visitors],
        meta=VisitorListMeta(
            pagination=PaginationMeta(
                page=1,
                page_size=VISITOR_LIST_LIMIT,
                pages=page_count(total, VISITOR_LIST_LIMIT),
                total=total,
            )
        ),
    )


@router.get("/{record_id}", response_model=VisitorEnvelope, status_code=status.HTTP_200_OK)
async def get_visitor(record_id: str, db: AsyncSession = Depends(get_db)):
    ensure_uuid(record_id, "Visitor")
    visitor = await VisitorTracker(db).get(record_id)
    return VisitorEnvelope(data=VisitorResponse.model_validate(visitor))
