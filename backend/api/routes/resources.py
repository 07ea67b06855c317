"""
Resource download route.
"""

import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from adapters.storage import FileStorage, get_file_storage
from api.utils import ensure_uuid
from infrastructure.database.connection import get_db
from services.resource_downloads import ResourceDownloadService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/resources", tags=["resources"])


@router.get("/{resource_id}/download")
async def download_resource(
    resource_id: str,
    db: AsyncSession = Depends(get_db),
    storage: FileStorage = Depends(get_file_storage),
):
    """
    Stream the file attached to a published resource and count the download.

    Returns 404 when the resource, its file reference or the stored file is
    missing, and 403 when the resource is not published. A failed counter
    update never blocks the download.
    """
    ensure_uuid(resource_id, "Resource")
    service = ResourceDownloadService(db, storage)
    download = await service.prepare(resource_id)

    await service.record_download(resource_id)

    logger.info(
        "Serving download for resource %s",
        resource_id,
        extra={"resource_id": resource_id, "outcome": "served"},
    )

    headers = {
        "Content-Disposition": f'attachment; filename="{quote(download.filename, safe="")}"',
        "Content-Length": str(download.size_bytes),
    }
    return StreamingResponse(
        storage.stream(download.storage_key),
        media_type=download.mime,
        headers=headers,
    )
