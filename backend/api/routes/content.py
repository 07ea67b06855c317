"""
Content CRUD routes for blogs, webinars, events, jobs and resources.

All five collections share one router factory. Create and update run the
content lifecycle hooks so that publishing an entry queues the newsletter.
"""

import logging
from dataclasses import dataclass

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from api.schemas.content import (
    BlogCreateRequest,
    BlogListResponse,
    BlogResponse,
    BlogUpdateRequest,
    EventCreateRequest,
    EventListResponse,
    EventResponse,
    EventUpdateRequest,
    JobCreateRequest,
    JobListResponse,
    JobResponse,
    JobUpdateRequest,
    ResourceCreateRequest,
    ResourceListResponse,
    ResourceResponse,
    ResourceUpdateRequest,
    WebinarCreateRequest,
    WebinarListResponse,
    WebinarResponse,
    WebinarUpdateRequest,
)
from api.utils import ensure_uuid, page_count
from core.domain import PUBLICATION_SHAPES, ContentKind, Flag
from core.errors import NotFoundError, ValidationError
from infrastructure.config.settings import settings
from infrastructure.database.connection import get_db
from infrastructure.database.models import UploadedFile
from services.content_lifecycle import CONTENT_MODELS, ContentLifecycle, get_content_lifecycle

logger = logging.getLogger(__name__)

# Columns that must never be set to NULL through a partial update
_NON_NULLABLE_FIELDS = {"title", "published"}


@dataclass(frozen=True)
class ContentCollection:
    """Wiring for one content collection."""

    kind: ContentKind
    prefix: str
    label: str
    create_schema: type[BaseModel]
    update_schema: type[BaseModel]
    response_schema: type[BaseModel]
    list_schema: type[BaseModel]

    @property
    def model(self) -> type:
        return CONTENT_MODELS[self.kind]


async def validate_resource_file(db: AsyncSession, file_id: str) -> UploadedFile:
    """
    A resource may only reference a PDF, CSV or Excel upload within the size limit.

    Raises:
        ValidationError: unknown upload, disallowed type or too large
    """
    try:
        ensure_uuid(file_id, "File")
    except NotFoundError:
        raise ValidationError("Referenced file does not exist")

    uploaded = await db.get(UploadedFile, file_id)
    if uploaded is None:
        raise ValidationError("Referenced file does not exist")

    allowed = settings.resource_allowed_mime_types_list
    if uploaded.mime not in allowed:
        raise ValidationError(
            f"Invalid file type: {uploaded.mime}. Only PDF, CSV, and Excel files are allowed."
        )
    if uploaded.size_bytes > settings.max_upload_bytes:
        limit_mb = settings.max_upload_bytes // (1024 * 1024)
        raise ValidationError(f"File size exceeds {limit_mb}MB limit.")
    return uploaded


def build_content_router(collection: ContentCollection) -> APIRouter:
    """Create the CRUD router for *collection*."""
    router = APIRouter(prefix=collection.prefix, tags=[collection.prefix.strip("/")])
    kind = collection.kind
    model = collection.model
    label = collection.label
    CreateSchema = collection.create_schema
    UpdateSchema = collection.update_schema

    async def _get_or_404(db: AsyncSession, entity_id: str):
        ensure_uuid(entity_id, label)
        entity = await db.get(model, entity_id)
        if entity is None:
            raise NotFoundError(f"{label} not found")
        return entity

    @router.post("", response_model=collection.response_schema, status_code=status.HTTP_201_CREATED)
    async def create_entry(
        request: CreateSchema,
        db: AsyncSession = Depends(get_db),
        lifecycle: ContentLifecycle = Depends(get_content_lifecycle),
    ):
        data = request.model_dump()
        if kind is ContentKind.RESOURCE and data.get("file_id"):
            await validate_resource_file(db, data["file_id"])

        entity = model(**data)
        db.add(entity)
        await db.commit()
        await db.refresh(entity)

        logger.info("Created %s %s", kind.value, entity.id, extra={"content_kind": kind.value, "content_id": entity.id})
        await lifecycle.after_create(kind, entity)
        return entity

    @router.get("", response_model=collection.list_schema)
    async def list_entries(
        page: int = Query(1, ge=1),
        page_size: int = Query(20, ge=1, le=100),
        published_only: bool = False,
        db: AsyncSession = Depends(get_db),
    ):
        query = select(model)
        if published_only:
            if PUBLICATION_SHAPES[kind] is Flag:
                query = query.where(model.published.is_(True))
            else:
                query = query.where(model.published_at.is_not(None))

        total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar() or 0

        query = query.order_by(model.created_at.desc())
        query = query.offset((page - 1) * page_size).limit(page_size)
        items = (await db.execute(query)).scalars().all()

        return collection.list_schema(
            items=items,
            total=total,
            page=page,
            page_size=page_size,
            pages=page_count(total, page_size),
        )

    @router.get("/{entity_id}", response_model=collection.response_schema)
    async def get_entry(entity_id: str, db: AsyncSession = Depends(get_db)):
        return await _get_or_404(db, entity_id)

    @router.put("/{entity_id}", response_model=collection.response_schema)
    async def update_entry(
        entity_id: str,
        request: UpdateSchema,
        db: AsyncSession = Depends(get_db),
        lifecycle: ContentLifecycle = Depends(get_content_lifecycle),
    ):
        ensure_uuid(entity_id, label)
        submitted = request.model_dump(exclude_unset=True)

        previous = await lifecycle.capture_previous_state(db, kind, entity_id)
        entity = await _get_or_404(db, entity_id)
        if kind is ContentKind.RESOURCE and submitted.get("file_id"):
            await validate_resource_file(db, submitted["file_id"])

        for field, value in submitted.items():
            if value is None and field in _NON_NULLABLE_FIELDS:
                continue
            setattr(entity, field, value)

        await db.commit()
        await db.refresh(entity)

        await lifecycle.after_update(kind, entity, previous, submitted)
        return entity

    @router.delete("/{entity_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_entry(entity_id: str, db: AsyncSession = Depends(get_db)):
        entity = await _get_or_404(db, entity_id)
        await db.delete(entity)
        await db.commit()
        logger.info("Deleted %s %s", kind.value, entity_id, extra={"content_kind": kind.value, "content_id": entity_id})
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router


COLLECTIONS = (
    ContentCollection(
        ContentKind.BLOG, "/blogs", "Blog",
        BlogCreateRequest, BlogUpdateRequest, BlogResponse, BlogListResponse,
    ),
    ContentCollection(
        ContentKind.WEBINAR, "/webinars", "Webinar",
        WebinarCreateRequest, WebinarUpdateRequest, WebinarResponse, WebinarListResponse,
    ),
    ContentCollection(
        ContentKind.EVENT, "/events", "Event",
        EventCreateRequest, EventUpdateRequest, EventResponse, EventListResponse,
    ),
    ContentCollection(
        ContentKind.CAREERS, "/jobs", "Job",
        JobCreateRequest, JobUpdateRequest, JobResponse, JobListResponse,
    ),
    ContentCollection(
        ContentKind.RESOURCE, "/resources", "Resource",
        ResourceCreateRequest, ResourceUpdateRequest, ResourceResponse, ResourceListResponse,
    ),
)

routers: list[APIRouter] = [build_content_router(c) for c in COLLECTIONS]
