"""Port for the backing record store."""

from collections.abc import Callable, Mapping
from typing import Protocol

from esiti.domain.models.records import Record, RecordDraft

RecordCallback = Callable[[Record], None]
DeleteCallback = Callable[[str], None]
Unsubscribe = Callable[[], None]


class RecordStorePort(Protocol):
    """Port exposing CRUD and a change feed over weekly outcome records."""

    def list_records(self) -> list[Record]:
        """Return every record, newest first."""

    def insert(self, draft: RecordDraft) -> Record:
        """Insert one record and return it as stored."""

    def insert_many(self, drafts: list[RecordDraft]) -> list[Record]:
        """Insert several records in one transaction."""

    def update(self, record_id: str, fields: Mapping[str, object]) -> None:
        """Update some columns of one record."""

    def has_hierarchy_columns(self) -> bool:
        """Return whether the table stores level and parent_id."""

    def delete(self, record_id: str) -> None:
        """Delete one record."""

    def subscribe_changes(
        self,
        on_insert: RecordCallback,
        on_update: RecordCallback,
        on_delete: DeleteCallback,
    ) -> Unsubscribe:
        """Register change callbacks and return a handle removing them."""


__all__ = [
    "RecordStorePort",
    "RecordCallback",
    "DeleteCallback",
    "Unsubscribe",
]
