"""
Newsletter subscription routes.
"""

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.schemas.newsletter import SubscribeRequest, SubscriptionEnvelope, SubscriptionResponse
from infrastructure.database.connection import get_db
from services.notifications import NotificationService, get_notification_service
from services.subscriptions import SubscriptionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/newsletter-subscriptions", tags=["newsletter"])


@router.post("", response_model=SubscriptionEnvelope, status_code=status.HTTP_201_CREATED)
async def subscribe(
    request: SubscribeRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
    notifications: NotificationService = Depends(get_notification_service),
):
    """
    Subscribe to the newsletter.

    Submitting an email that is already on file updates its name and
    categories and re-enables delivery (200) instead of creating a second
    row (201).
    """
    service = SubscriptionService(db, notifications)
    subscription, created = await service.subscribe(request.name, str(request.email), request.categories)

    if not created:
        response.status_code = status.HTTP_200_OK

    return SubscriptionEnvelope(
        data=SubscriptionResponse.model_validate(subscription),
        message="Subscribed successfully" if created else "Subscription updated successfully",
    )


@router.post("/unsubscribe/{token}", response_model=SubscriptionEnvelope)
async def unsubscribe(
    token: str,
    db: AsyncSession = Depends(get_db),
):
    """Stop newsletter delivery for the subscription owning *token*."""
    subscription = await SubscriptionService(db).unsubscribe(token)
    return SubscriptionEnvelope(
        data=SubscriptionResponse.model_validate(subscription),
        message="Successfully unsubscribed from newsletter",
    )
