"""Domain policies package."""

from .hierarchy import (
    ALLOWED_PARENT_LEVELS,
    allowed_parent_levels,
    can_have_parent,
    validate_assignment,
)

__all__ = [
    "ALLOWED_PARENT_LEVELS",
    "allowed_parent_levels",
    "can_have_parent",
    "validate_assignment",
]
