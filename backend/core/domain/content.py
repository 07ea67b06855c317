"""Content domain entities."""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union


class ContentKind(str, Enum):
    """Publishable content kinds. The value is the newsletter category tag."""
    BLOG = "blog"
    WEBINAR = "webinar"
    EVENT = "event"
    RESOURCE = "resource"
    CAREERS = "careers"


# Newsletter category that matches every content kind
ALL_CATEGORIES = "all"


@dataclass(frozen=True)
class Timestamp:
    """Publication state carried as a nullable publish timestamp."""

    published_at: Optional[datetime] = None

    @property
    def is_published(self) -> bool:
        return self.published_at is not None


@dataclass(frozen=True)
class Flag:
    """Publication state carried as a boolean flag."""

    published: bool = False

    @property
    def is_published(self) -> bool:
        return self.published is True


PublicationState = Union[Timestamp, Flag]

# Which publication-state shape each kind uses
PUBLICATION_SHAPES: dict[ContentKind, type] = {
    ContentKind.BLOG: Timestamp,
    ContentKind.WEBINAR: Timestamp,
    ContentKind.EVENT: Timestamp,
    ContentKind.CAREERS: Timestamp,
    ContentKind.RESOURCE: Flag,
}


def publication_state_of(kind: ContentKind, entity: Any) -> PublicationState:
    """Read the publication state of an ORM row (or any object) for *kind*."""
    if PUBLICATION_SHAPES[kind] is Flag:
        return Flag(published=getattr(entity, "published", False) is True)
    return Timestamp(published_at=getattr(entity, "published_at", None))


@dataclass(frozen=True)
class ContentItem:
    """
    The fields of a content entity that newsletters read.

    Summary fields are optional because each kind stores its summary under a
    different name.
    """

    id: str
    title: str
    excerpt: Optional[str] = None
    short_description: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_model(cls, entity: Any) -> "ContentItem":
        return cls(
            id=str(entity.id),
            title=entity.title,
            excerpt=getattr(entity, "excerpt", None),
            short_description=getattr(entity, "short_description", None),
            description=getattr(entity, "description", None),
        )
