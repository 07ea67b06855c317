"""
Shared API utility functions.
"""

import math
from uuid import UUID

from core.errors import NotFoundError


def ensure_uuid(value: str, label: str = "Record") -> str:
    """Reject path ids that cannot be a primary key with a plain 404."""
    try:
        UUID(value)
    except (ValueError, TypeError, AttributeError):
        raise NotFoundError(f"{label} not found")
    return value


def page_count(total: int, page_size: int) -> int:
    return math.ceil(total / page_size) if total > 0 else 0
