"""
Public intake forms: CTA inquiries, partner requests and job applications.

Each submission is stored first; the admin notification and the
acknowledgement to the submitter are queued afterwards and can fail without
affecting the response.
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from adapters.email.templates import (
    application_admin_email,
    application_received_email,
    inquiry_admin_email,
    inquiry_thank_you_email,
    partner_admin_email,
    partner_thank_you_email,
)
from api.schemas.intake import (
    CtaInquiryEnvelope,
    CtaInquiryRequest,
    CtaInquiryResponse,
    JobApplicationEnvelope,
    JobApplicationRequest,
    JobApplicationResponse,
    PartnerRequestEnvelope,
    PartnerRequestRequest,
    PartnerRequestResponse,
)
from infrastructure.database.connection import get_db
from infrastructure.database.models import ApplicationStatus, CtaInquiry, JobApplication, PartnerRequest
from services.notifications import NotificationService, get_notification_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["intake"])


@router.post("/cta-inquiries", response_model=CtaInquiryEnvelope, status_code=status.HTTP_201_CREATED)
async def create_cta_inquiry(
    request: CtaInquiryRequest,
    db: AsyncSession = Depends(get_db),
    notifications: NotificationService = Depends(get_notification_service),
):
    """Record a contact/CTA inquiry and notify the sales team."""
    data = request.model_dump()
    data["email"] = str(request.email)
    inquiry = CtaInquiry(**data)
    db.add(inquiry)
    await db.commit()
    await db.refresh(inquiry)

    logger.info("New CTA inquiry %s", inquiry.id)
    await notifications.queue_emails(
        "inquiry",
        inquiry_admin_email(inquiry),
        inquiry_thank_you_email(inquiry),
    )

    return CtaInquiryEnvelope(
        data=CtaInquiryResponse.model_validate(inquiry),
        message="Inquiry submitted successfully",
    )


@router.post("/partner-requests", response_model=PartnerRequestEnvelope, status_code=status.HTTP_201_CREATED)
async def create_partner_request(
    request: PartnerRequestRequest,
    db: AsyncSession = Depends(get_db),
    notifications: NotificationService = Depends(get_notification_service),
):
    """Record a partnership request and notify the partnerships team."""
    data = request.model_dump()
    data["business_email"] = str(request.business_email)
    partner_request = PartnerRequest(**data)
    db.add(partner_request)
    await db.commit()
    await db.refresh(partner_request)

    logger.info("New partner request %s", partner_request.id)
    await notifications.queue_emails(
        "partner request",
        partner_admin_email(partner_request),
        partner_thank_you_email(partner_request),
    )

    return PartnerRequestEnvelope(
        data=PartnerRequestResponse.model_validate(partner_request),
        message="Partner request submitted successfully",
    )


@router.post("/job-applications", response_model=JobApplicationEnvelope, status_code=status.HTTP_201_CREATED)
async def create_job_application(
    request: JobApplicationRequest,
    db: AsyncSession = Depends(get_db),
    notifications: NotificationService = Depends(get_notification_service),
):
    """Record a job application with status ``New`` and notify HR."""
    data = request.model_dump()
    data["email"] = str(request.email)
    application = JobApplication(**data, status=ApplicationStatus.NEW.value)
    db.add(application)
    await db.commit()
    await db.refresh(application)

    logger.info("New job application %s for %s", application.id, application.job_title)
    await notifications.queue_emails(
        "job application",
        application_received_email(application),
        application_admin_email(application),
    )

    return JobApplicationEnvelope(
        data=JobApplicationResponse.model_validate(application),
        message="Application submitted successfully",
    )
