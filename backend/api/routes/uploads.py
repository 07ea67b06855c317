"""
File upload route.
"""

import logging
import mimetypes
from pathlib import Path
from uuid import uuid4

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from adapters.storage import FileStorage, StorageError, get_file_storage
from api.schemas.upload import UploadedFileResponse
from infrastructure.config.settings import settings
from infrastructure.database.connection import get_db
from infrastructure.database.models import UploadedFile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/uploads", tags=["uploads"])


@router.post("", response_model=UploadedFileResponse, status_code=status.HTTP_201_CREATED)
async def upload_file(
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    storage: FileStorage = Depends(get_file_storage),
):
    """
    Store an uploaded file and record it.

    The file is saved under a random hash plus its original extension, so
    two uploads with the same name never collide.
    """
    data = await file.read()
    size = len(data)

    if size > settings.max_upload_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File too large. Maximum size: {settings.max_upload_bytes / 1024 / 1024:.0f} MB",
        )
    if size == 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File is empty",
        )

    original_name = Path(file.filename or "file").name
    ext = Path(original_name).suffix.lower()
    mime = file.content_type or mimetypes.guess_type(original_name)[0] or "application/octet-stream"
    file_hash = uuid4().hex

    try:
        await storage.save(data, f"{file_hash}{ext}", content_type=mime)
    except StorageError as e:
        logger.error("Failed to store upload %s: %s", original_name, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save file to storage",
        ) from e

    uploaded = UploadedFile(
        name=original_name,
        hash=file_hash,
        ext=ext,
        mime=mime,
        size_bytes=size,
        provider=storage.provider,
    )
    db.add(uploaded)
    await db.commit()
    await db.refresh(uploaded)

    logger.info("Stored upload %s (%d bytes)", uploaded.id, size)
    return uploaded
