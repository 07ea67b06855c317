"""
Resource downloads and the download counter.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from adapters.storage import FileStorage
from core.errors import CounterUpdateError, ForbiddenError, NotFoundError
from infrastructure.database.models import Resource

logger = logging.getLogger(__name__)

DEFAULT_MIME = "application/octet-stream"


@dataclass(frozen=True)
class DownloadableFile:
    """Everything the route needs to stream a resource file."""

    resource_id: str
    storage_key: str
    filename: str
    mime: str
    size_bytes: int


class ResourceDownloadService:
    """Checks download preconditions and counts downloads."""

    def __init__(
        self,
        db: AsyncSession,
        storage: FileStorage,
        log: Optional[logging.Logger] = None,
    ):
        self.db = db
        self.storage = storage
        self.log = log or logger

    async def prepare(self, resource_id: str) -> DownloadableFile:
        """
        Resolve the file behind *resource_id*.

        Checks run in order: resource exists, resource is published, a file
        is attached, the file is present in storage.

        Raises:
            NotFoundError: resource, file reference or stored file missing
            ForbiddenError: resource is not published
        """
        result = await self.db.execute(
            select(Resource).options(selectinload(Resource.file)).where(Resource.id == resource_id)
        )
        resource = result.scalar_one_or_none()

        if resource is None:
            raise NotFoundError("Resource not found")
        if resource.published is not True:
            raise ForbiddenError("Resource is not available for download")
        if resource.file is None:
            raise NotFoundError("No file attached to this resource")

        uploaded = resource.file
        if not await self.storage.exists(uploaded.storage_key):
            self.log.warning(
                "File for resource %s missing from storage",
                resource_id,
                extra={"resource_id": resource_id, "reason": uploaded.storage_key},
            )
            raise NotFoundError("File not found")

        return DownloadableFile(
            resource_id=resource.id,
            storage_key=uploaded.storage_key,
            filename=uploaded.name,
            mime=uploaded.mime or DEFAULT_MIME,
            size_bytes=uploaded.size_bytes or 0,
        )

    async def record_download(self, resource_id: str) -> bool:
        """
        Atomically add one to the resource's download count.

        A failure is logged and swallowed; the download itself goes ahead.
        """
        try:
            await self._increment(resource_id)
        except CounterUpdateError as e:
            self.log.error(
                e.message,
                extra={"resource_id": resource_id, "outcome": "counter_failed", "reason": str(e.__cause__)},
            )
            return False
        return True

    async def _increment(self, resource_id: str) -> None:
        try:
            await self.db.execute(
                update(Resource)
                .where(Resource.id == resource_id)
                .values(download_count=Resource.download_count + 1)
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise CounterUpdateError(f"Failed to increment download count: {e}") from e
