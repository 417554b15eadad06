"""Domain package for business rules and core models."""

from .constants import DEFAULT_LEVEL, EDITABLE_FIELDS
from .errors import (
    EsitiError,
    HierarchyAssignmentError,
    ImportPartialFailure,
    PersistenceError,
    RecordNotFoundError,
    ValidationError,
)
from .models import (
    HierarchyAssignment,
    Level,
    NodeValues,
    Record,
    RecordDraft,
    ViewState,
)
from .policies import validate_assignment

__all__ = [
    "DEFAULT_LEVEL",
    "EDITABLE_FIELDS",
    "EsitiError",
    "HierarchyAssignment",
    "HierarchyAssignmentError",
    "ImportPartialFailure",
    "Level",
    "NodeValues",
    "PersistenceError",
    "Record",
    "RecordDraft",
    "RecordNotFoundError",
    "ValidationError",
    "ViewState",
    "validate_assignment",
]
