"""
Newsletter subscription API schemas.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class SubscribeRequest(BaseModel):
    """Subscribe (or re-subscribe) an email address."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    categories: list[str] = Field(
        default_factory=list,
        description="Content kind tags: blog, webinar, event, resource, careers, or all",
    )

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name is required")
        return v.strip()

    @field_validator("categories")
    @classmethod
    def drop_blank_categories(cls, v: list[str]) -> list[str]:
        return [c.strip() for c in v if c and c.strip()]


class SubscriptionResponse(BaseModel):
    """Subscription as returned to the client. The unsubscribe token is never exposed."""

    id: str
    name: str
    email: str
    categories: list[str]
    subscribed: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SubscriptionEnvelope(BaseModel):
    data: SubscriptionResponse
    message: str
