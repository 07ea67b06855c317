"""
Schemas for public intake forms: CTA inquiries, partner requests, job applications.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


def _required(v: str) -> str:
    if not v or not v.strip():
        raise ValueError("This field is required")
    return v.strip()


# ============================================================================
# CTA Inquiry
# ============================================================================


class CtaInquiryRequest(BaseModel):
    name: str = Field(..., max_length=255)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=50)
    company: Optional[str] = Field(None, max_length=255)
    service_requested: Optional[str] = Field(None, max_length=255)
    message: str
    source_page: Optional[str] = Field(None, max_length=500)

    @field_validator("name", "message")
    @classmethod
    def required_not_blank(cls, v: str) -> str:
        return _required(v)


class CtaInquiryResponse(BaseModel):
    id: str
    name: str
    email: str
    phone: Optional[str]
    company: Optional[str]
    service_requested: Optional[str]
    message: str
    source_page: Optional[str]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CtaInquiryEnvelope(BaseModel):
    data: CtaInquiryResponse
    message: str


# ============================================================================
# Partner Request
# ============================================================================


class PartnerRequestRequest(BaseModel):
    company_name: str = Field(..., max_length=255)
    contact_name: str = Field(..., max_length=255)
    business_email: EmailStr
    phone_number: Optional[str] = Field(None, max_length=50)
    partner_type: str = Field(..., max_length=100)
    about_business: str

    @field_validator("company_name", "contact_name", "partner_type", "about_business")
    @classmethod
    def required_not_blank(cls, v: str) -> str:
        return _required(v)


class PartnerRequestResponse(BaseModel):
    id: str
    company_name: str
    contact_name: str
    business_email: str
    phone_number: Optional[str]
    partner_type: str
    about_business: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PartnerRequestEnvelope(BaseModel):
    data: PartnerRequestResponse
    message: str


# ============================================================================
# Job Application
# ============================================================================


class JobApplicationRequest(BaseModel):
    full_name: str = Field(..., max_length=255)
    email: EmailStr
    phone: str = Field(..., max_length=50)
    job_title: str = Field(..., max_length=500)
    years_of_experience: Optional[int] = Field(None, ge=0, le=80)
    current_company: Optional[str] = Field(None, max_length=255)
    linkedin_url: Optional[str] = Field(None, max_length=500)
    cover_letter: Optional[str] = None
    resume_file_id: Optional[str] = None

    @field_validator("full_name", "phone", "job_title")
    @classmethod
    def required_not_blank(cls, v: str) -> str:
        return _required(v)

    @field_validator("resume_file_id")
    @classmethod
    def resume_file_id_is_uuid(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        try:
            UUID(v)
        except ValueError:
            raise ValueError("resume_file_id must be a file id")
        return v


class JobApplicationResponse(BaseModel):
    id: str
    full_name: str
    email: str
    phone: str
    job_title: str
    years_of_experience: Optional[int]
    current_company: Optional[str]
    linkedin_url: Optional[str]
    cover_letter: Optional[str]
    resume_file_id: Optional[str]
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class JobApplicationEnvelope(BaseModel):
    data: JobApplicationResponse
    message: str
