"""
Inbound form submissions: CTA inquiries, partner requests and job applications.
"""

from enum import Enum
from typing import Optional
from uuid import uuid4

from sqlalchemy import Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class ApplicationStatus(str, Enum):
    """Job application review status."""

    NEW = "New"
    REVIEWING = "Reviewing"
    SHORTLISTED = "Shortlisted"
    REJECTED = "Rejected"
    HIRED = "Hired"


class CtaInquiry(Base, TimestampMixin):
    """Contact / call-to-action inquiry."""

    __tablename__ = "cta_inquiries"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    company: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    service_requested: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    source_page: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    def __repr__(self) -> str:
        return f"<CtaInquiry(id={self.id}, email={self.email})>"


class PartnerRequest(Base, TimestampMixin):
    """Partnership request from a prospective partner company."""

    __tablename__ = "partner_requests"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    company_name: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_name: Mapped[str] = mapped_column(String(255), nullable=False)
    business_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    partner_type: Mapped[str] = mapped_column(String(100), nullable=False)
    about_business: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<PartnerRequest(id={self.id}, company={self.company_name})>"


class JobApplication(Base, TimestampMixin):
    """Application submitted from the careers page."""

    __tablename__ = "job_applications"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    job_title: Mapped[str] = mapped_column(String(500), nullable=False)
    years_of_experience: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    current_company: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    linkedin_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    cover_letter: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    resume_file_id: Mapped[Optional[str]] = mapped_column(UUID(as_uuid=False), nullable=True)
    status: Mapped[str] = mapped_column(
        String(50),
        default=ApplicationStatus.NEW.value,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<JobApplication(id={self.id}, job_title={self.job_title[:30]})>"
