"""Newsletter domain entities."""
from dataclasses import dataclass, field
from typing import Any, Optional

from .content import ContentKind


@dataclass(frozen=True)
class Subscriber:
    """A newsletter recipient as seen by the fan-out pipeline."""

    email: str
    name: str
    unsubscribe_token: str
    categories: tuple[str, ...] = ()
    subscribed: bool = True
    id: Optional[str] = None

    @classmethod
    def from_model(cls, row: Any) -> "Subscriber":
        categories = row.categories if isinstance(row.categories, list) else []
        return cls(
            id=str(row.id),
            email=row.email,
            name=row.name,
            unsubscribe_token=row.unsubscribe_token,
            categories=tuple(c for c in categories if isinstance(c, str)),
            subscribed=bool(row.subscribed),
        )


@dataclass(frozen=True)
class DispatchOutcome:
    """Result of one delivery attempt."""

    recipient: str
    delivered: bool
    reason: Optional[str] = None


@dataclass
class FanOutReport:
    """Aggregate of a single newsletter fan-out, used for logging."""

    kind: ContentKind | str
    content_id: str
    matched: int = 0
    outcomes: list[DispatchOutcome] = field(default_factory=list)

    @property
    def sent(self) -> int:
        return sum(1 for o in self.outcomes if o.delivered)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if not o.delivered)
