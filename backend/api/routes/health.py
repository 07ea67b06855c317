"""Health check endpoints."""

import asyncio
import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from adapters.email import MailTransport, get_mail_transport
from adapters.storage import FileStorage, get_file_storage
from infrastructure.config import get_settings
from infrastructure.database import get_db
from services.task_queue import TaskQueue, get_task_queue

logger = logging.getLogger(__name__)

router = APIRouter()
settings = get_settings()


@router.get("/health")
async def health_check():
    """Basic health check."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "timestamp": datetime.now(UTC).isoformat(),
    }


@router.get("/health/db")
async def health_check_db(db: AsyncSession = Depends(get_db)):
    """Health check with database connectivity."""
    try:
        result = await asyncio.wait_for(db.execute(text("SELECT 1")), timeout=5.0)
        result.scalar()
        db_status = "connected"
    except TimeoutError:
        logger.error("Health check DB timeout")
        db_status = "error: database timeout"
    except Exception as e:
        logger.error("Health check DB error: %s", str(e))
        db_status = "error: database check failed"

    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "database": db_status,
        "timestamp": datetime.now(UTC).isoformat(),
    }


@router.get("/health/ready")
async def readiness_check(db: AsyncSession = Depends(get_db)):
    """Kubernetes-style readiness probe."""
    try:
        await asyncio.wait_for(db.execute(text("SELECT 1")), timeout=5.0)
        db_ok = True
    except Exception:
        db_ok = False

    return {
        "ready": db_ok,
        "database": "ok" if db_ok else "unavailable",
    }


@router.get("/health/live")
async def liveness_check():
    """Kubernetes-style liveness probe."""
    return {"alive": True}


@router.get("/health/services")
async def services_check(
    transport: MailTransport = Depends(get_mail_transport),
    storage: FileStorage = Depends(get_file_storage),
    queue: TaskQueue = Depends(get_task_queue),
):
    """Mail transport, storage backend and background task status."""
    mail_configured = bool(getattr(transport, "is_configured", True))
    return {
        "status": "healthy" if mail_configured else "degraded",
        "services": {
            "mail": {"configured": mail_configured},
            "storage": {"provider": storage.provider},
            "tasks": queue.stats(),
        },
        "timestamp": datetime.now(UTC).isoformat(),
    }
