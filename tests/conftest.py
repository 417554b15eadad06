"""Shared fixtures and in-memory fakes for the test suite."""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from esiti.application.dashboard_state import DashboardState, HierarchySource
from esiti.application.ports.hierarchy_store import LocalHierarchyCache
from esiti.domain.errors import PersistenceError
from esiti.domain.models.records import HierarchyAssignment, Level, Record


def build_record(
    record_id: str,
    name: str | None = None,
    negativo="0",
    cauzione="0",
    vers="0",
    disponibilita="0",
    hierarchy: HierarchyAssignment | None = None,
) -> Record:
    """Return a record with Decimal amounts built from plain values."""
    return Record(
        id=record_id,
        name=name or record_id.upper(),
        negativo=Decimal(str(negativo)),
        cauzione=Decimal(str(cauzione)),
        versamenti_settimanali=Decimal(str(vers)),
        disponibilita=Decimal(str(disponibilita)),
        hierarchy=hierarchy,
    )


class InMemoryRecordStore:
    """Record store fake keeping rows in a list, newest first."""

    def __init__(
        self,
        records: list[Record] | None = None,
        hierarchy_columns: bool = False,
    ) -> None:
        self.records = list(records or [])
        self.hierarchy_columns = hierarchy_columns
        self.fail_writes = False
        self.update_calls: list[tuple[str, dict]] = []
        self._listeners = []

    def list_records(self) -> list[Record]:
        return list(self.records)

    def has_hierarchy_columns(self) -> bool:
        return self.hierarchy_columns

    def insert(self, draft):
        return self.insert_many([draft])[0]

    def insert_many(self, drafts):
        if self.fail_writes:
            raise PersistenceError("insert rejected")
        stored = [draft.to_record() for draft in drafts]
        self.records = [*stored, *self.records]
        for record in stored:
            for on_insert, _, _ in list(self._listeners):
                on_insert(record)
        return stored

    def update(self, record_id, fields):
        if self.fail_writes:
            raise PersistenceError("update rejected")
        self.update_calls.append((record_id, dict(fields)))
        for index, record in enumerate(self.records):
            if record.id != record_id:
                continue
            for name, value in fields.items():
                if name in ("level", "parent_id"):
                    continue
                record = record.with_field(name, value)
            self.records[index] = record
            for _, on_update, _ in list(self._listeners):
                on_update(record)
            return
        raise PersistenceError(f"Record not found: {record_id}")

    def delete(self, record_id):
        if self.fail_writes:
            raise PersistenceError("delete rejected")
        self.records = [
            record for record in self.records if record.id != record_id
        ]
        for _, _, on_delete in list(self._listeners):
            on_delete(record_id)

    def subscribe_changes(self, on_insert, on_update, on_delete):
        listener = (on_insert, on_update, on_delete)
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)


class InMemoryHierarchyStore:
    """Hierarchy store fake remembering every saved snapshot."""

    def __init__(self, cache: LocalHierarchyCache | None = None) -> None:
        self.cache = cache or LocalHierarchyCache()
        self.saved: list[LocalHierarchyCache] = []

    def load(self) -> LocalHierarchyCache:
        return LocalHierarchyCache(
            levels=dict(self.cache.levels),
            parents=dict(self.cache.parents),
            vers_include=dict(self.cache.vers_include),
        )

    def save(self, cache: LocalHierarchyCache) -> None:
        self.cache = cache
        self.saved.append(cache)


def local_state(
    records: list[Record],
    levels: dict[str, Level] | None = None,
    parents: dict[str, str | None] | None = None,
    vers_include: dict[str, bool] | None = None,
) -> DashboardState:
    """Return a state whose hierarchy lives in the local cache."""
    state = DashboardState()
    state.replace_all(
        records,
        LocalHierarchyCache(
            levels=dict(levels or {}),
            parents=dict(parents or {}),
            vers_include=dict(vers_include or {}),
        ),
        HierarchySource.LOCAL,
    )
    return state


def backend_state(records: list[Record]) -> DashboardState:
    """Return a state whose hierarchy comes from the records themselves."""
    state = DashboardState()
    state.replace_all(records, LocalHierarchyCache(), HierarchySource.BACKEND)
    return state


@pytest.fixture
def fake_logger() -> MagicMock:
    return MagicMock()


@pytest.fixture
def record_store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def hierarchy_store() -> InMemoryHierarchyStore:
    return InMemoryHierarchyStore()
