"""
Upload schemas.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class UploadedFileResponse(BaseModel):
    id: str
    name: str
    ext: str
    mime: str
    size_bytes: int
    provider: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
