"""
Content API schemas for blogs, webinars, events, jobs and resources.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# ============================================================================
# Blog Schemas
# ============================================================================


class BlogCreateRequest(BaseModel):
    """Request to create a blog post. Set ``published_at`` to publish immediately."""

    title: str = Field(..., min_length=1, max_length=500)
    slug: Optional[str] = Field(None, max_length=255)
    excerpt: Optional[str] = None
    content: Optional[str] = None
    author: Optional[str] = Field(None, max_length=255)
    cover_image_url: Optional[str] = Field(None, max_length=500)
    published_at: Optional[datetime] = None


class BlogUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    slug: Optional[str] = Field(None, max_length=255)
    excerpt: Optional[str] = None
    content: Optional[str] = None
    author: Optional[str] = Field(None, max_length=255)
    cover_image_url: Optional[str] = Field(None, max_length=500)
    published_at: Optional[datetime] = None


class BlogResponse(BaseModel):
    id: str
    title: str
    slug: Optional[str]
    excerpt: Optional[str]
    content: Optional[str]
    author: Optional[str]
    cover_image_url: Optional[str]
    published_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BlogListResponse(BaseModel):
    items: list[BlogResponse]
    total: int
    page: int
    page_size: int
    pages: int


# ============================================================================
# Webinar Schemas
# ============================================================================


class WebinarCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    short_description: Optional[str] = None
    description: Optional[str] = None
    starts_at: Optional[datetime] = None
    registration_url: Optional[str] = Field(None, max_length=500)
    published_at: Optional[datetime] = None


class WebinarUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    short_description: Optional[str] = None
    description: Optional[str] = None
    starts_at: Optional[datetime] = None
    registration_url: Optional[str] = Field(None, max_length=500)
    published_at: Optional[datetime] = None


class WebinarResponse(BaseModel):
    id: str
    title: str
    short_description: Optional[str]
    description: Optional[str]
    starts_at: Optional[datetime]
    registration_url: Optional[str]
    published_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class WebinarListResponse(BaseModel):
    items: list[WebinarResponse]
    total: int
    page: int
    page_size: int
    pages: int


# ============================================================================
# Event Schemas
# ============================================================================


class EventCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    short_description: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = Field(None, max_length=255)
    starts_at: Optional[datetime] = None
    published_at: Optional[datetime] = None


class EventUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    short_description: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = Field(None, max_length=255)
    starts_at: Optional[datetime] = None
    published_at: Optional[datetime] = None


class EventResponse(BaseModel):
    id: str
    title: str
    short_description: Optional[str]
    description: Optional[str]
    location: Optional[str]
    starts_at: Optional[datetime]
    published_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class EventListResponse(BaseModel):
    items: list[EventResponse]
    total: int
    page: int
    page_size: int
    pages: int


# ============================================================================
# Job Schemas
# ============================================================================


class JobCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    department: Optional[str] = Field(None, max_length=255)
    location: Optional[str] = Field(None, max_length=255)
    employment_type: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    published_at: Optional[datetime] = None


class JobUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    department: Optional[str] = Field(None, max_length=255)
    location: Optional[str] = Field(None, max_length=255)
    employment_type: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    published_at: Optional[datetime] = None


class JobResponse(BaseModel):
    id: str
    title: str
    department: Optional[str]
    location: Optional[str]
    employment_type: Optional[str]
    description: Optional[str]
    published_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class JobListResponse(BaseModel):
    items: list[JobResponse]
    total: int
    page: int
    page_size: int
    pages: int


# ============================================================================
# Resource Schemas
# ============================================================================


class ResourceCreateRequest(BaseModel):
    """Request to create a downloadable resource. ``published`` makes it downloadable."""

    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)
    published: bool = False
    file_id: Optional[str] = None


class ResourceUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)
    published: Optional[bool] = None
    file_id: Optional[str] = None


class ResourceResponse(BaseModel):
    id: str
    title: str
    description: Optional[str]
    category: Optional[str]
    published: bool
    download_count: int
    file_id: Optional[str]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ResourceListResponse(BaseModel):
    items: list[ResourceResponse]
    total: int
    page: int
    page_size: int
    pages: int
