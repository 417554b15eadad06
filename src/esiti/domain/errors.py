"""Domain exceptions.

Every error raised by use cases inherits from EsitiError so adapters can
turn any failure into a transient notification with a single handler.
"""


class EsitiError(Exception):
    """Base class for recoverable dashboard errors."""


class ValidationError(EsitiError):
    """Input rejected before reaching the record store."""


class ImportPartialFailure(ValidationError):
    """Bulk import left no valid row to insert."""


class HierarchyAssignmentError(EsitiError):
    """Proposed parent is not allowed for the record's level."""


class PersistenceError(EsitiError):
    """The record store failed to apply a write."""


class RecordNotFoundError(EsitiError):
    """Operation targets an id that is not in the current state."""

    def __init__(self, record_id: str) -> None:
        super().__init__(f"Record not found: {record_id}")
        self.record_id = record_id


__all__ = [
    "EsitiError",
    "ValidationError",
    "ImportPartialFailure",
    "HierarchyAssignmentError",
    "PersistenceError",
    "RecordNotFoundError",
]
