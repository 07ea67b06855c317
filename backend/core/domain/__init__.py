# Domain Entities
# Pure business objects with no external dependencies
from .content import (
    ALL_CATEGORIES,
    PUBLICATION_SHAPES,
    ContentItem,
    ContentKind,
    Flag,
    PublicationState,
    Timestamp,
    publication_state_of,
)
from .newsletter import DispatchOutcome, FanOutReport, Subscriber

__all__ = [
    "ALL_CATEGORIES",
    "PUBLICATION_SHAPES",
    "ContentItem",
    "ContentKind",
    "Flag",
    "PublicationState",
    "Timestamp",
    "publication_state_of",
    "DispatchOutcome",
    "FanOutReport",
    "Subscriber",
]
