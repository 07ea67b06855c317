"""
SQLAlchemy database models.
"""

from .base import Base, TimestampMixin
from .content import Blog, Event, Job, Resource, UploadedFile, Webinar
from .intake import ApplicationStatus, CtaInquiry, JobApplication, PartnerRequest
from .newsletter import NewsletterSubscription, generate_unsubscribe_token
from .visitor import Visitor

__all__ = [
    "Base",
    "TimestampMixin",
    "Blog",
    "Webinar",
    "Event",
    "Job",
    "Resource",
    "UploadedFile",
    "NewsletterSubscription",
    "generate_unsubscribe_token",
    "CtaInquiry",
    "PartnerRequest",
    "JobApplication",
    "ApplicationStatus",
    "Visitor",
]
