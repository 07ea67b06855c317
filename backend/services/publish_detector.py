"""
Publish-transition detection.

Decides whether a content mutation moved an entity from unpublished to
published, which is the only moment a newsletter goes out. Each publication
shape has its own rule; ``published_on_update`` dispatches on the kind.
"""

from collections.abc import Mapping
from typing import Any, Optional

from core.domain import PUBLICATION_SHAPES, ContentKind, Flag, PublicationState, Timestamp


def published_on_create(state: PublicationState) -> bool:
    """A freshly created entity triggers iff it is already published."""
    return state.is_published


def timestamp_transition(
    previous: Optional[Timestamp],
    current: Timestamp,
    submitted: Mapping[str, Any],
) -> bool:
    """
    Timestamp kinds fire only when the update itself carries a publish
    timestamp and the entity had none before.

    Re-saving an already published post with the same ``published_at``
    therefore never sends a second newsletter.
    """
    if current.published_at is None:
        return False
    if not submitted.get("published_at"):
        return False
    return previous is None or previous.published_at is None


def flag_transition(previous: Optional[Flag], current: Flag) -> bool:
    """Flag kinds fire on a false (or unknown) to true edge."""
    was_published = previous is not None and previous.published is True
    return not was_published and current.published is True


def published_on_update(
    kind: ContentKind,
    previous: Optional[PublicationState],
    current: PublicationState,
    submitted: Mapping[str, Any],
) -> bool:
    """
    Return True when this update published the entity.

    Args:
        kind: Content kind of the entity
        previous: State captured before the update, or None if unknown
        current: State after the update was committed
        submitted: The fields the client sent with the update
    """
    if PUBLICATION_SHAPES[kind] is Flag:
        return flag_transition(
            previous if isinstance(previous, Flag) else None,
            current,
        )
    return timestamp_transition(
        previous if isinstance(previous, Timestamp) else None,
        current,
        submitted,
    )
