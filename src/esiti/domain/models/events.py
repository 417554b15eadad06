"""Domain models for record store change notifications."""

from dataclasses import dataclass
from enum import Enum

from esiti.domain.models.records import Record


class ChangeOp(str, Enum):
    """Kind of change confirmed by the record store."""

    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class ChangeEvent:
    """A confirmed change, applied in arrival order by the state reducer."""

    op: ChangeOp
    record_id: str
    record: Record | None = None


__all__ = ["ChangeOp", "ChangeEvent"]
