"""API Routes."""

from fastapi import APIRouter

from .content import routers as content_routers
from .health import router as health_router
from .intake import router as intake_router
from .newsletter import router as newsletter_router
from .resources import router as resources_router
from .uploads import router as uploads_router
from .visitors import router as visitors_router

# Create main API router
api_router = APIRouter()

# Include route modules
api_router.include_router(health_router, tags=["Health"])
api_router.include_router(newsletter_router)
api_router.include_router(resources_router)
for content_router in content_routers:
    api_router.include_router(content_router)
api_router.include_router(uploads_router)
api_router.include_router(intake_router)
api_router.include_router(visitors_router)
