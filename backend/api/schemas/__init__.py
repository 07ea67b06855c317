"""
API request and response schemas.
"""

from .newsletter import SubscribeRequest, SubscriptionEnvelope, SubscriptionResponse
from .upload import UploadedFileResponse
from .visitor import TrackVisitRequest, VisitorEnvelope, VisitorListResponse, VisitorResponse

__all__ = [
    "SubscribeRequest",
    "SubscriptionEnvelope",
    "SubscriptionResponse",
    "UploadedFileResponse",
    "TrackVisitRequest",
    "VisitorEnvelope",
    "VisitorListResponse",
    "VisitorResponse",
]
