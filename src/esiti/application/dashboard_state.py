"""In-memory repository shared by the dashboard use cases.

The state holds the record snapshot, the hierarchy caches (levels, parents)
and the per-record inclusion flags. Every mutation bumps a generation
counter; the tree and aggregator are rebuilt lazily when the generation
changes, so cached sums never outlive their inputs.
"""

from collections.abc import Iterable, Mapping
from enum import Enum
from types import MappingProxyType

from esiti.application.ports.hierarchy_store import LocalHierarchyCache
from esiti.domain.constants import DEFAULT_LEVEL
from esiti.domain.errors import RecordNotFoundError
from esiti.domain.models.events import ChangeEvent, ChangeOp
from esiti.domain.models.records import HierarchyAssignment, Level, Record
from esiti.domain.services.aggregation import Aggregator
from esiti.domain.services.tree import HierarchyTree, build_tree


class HierarchySource(str, Enum):
    """Where level and parent assignments are authoritative."""

    BACKEND = "backend"
    LOCAL = "local"


def detect_hierarchy_source(
    records: list[Record],
    schema_has_hierarchy: bool = False,
) -> HierarchySource:
    """Inspect the first fetched record for backend hierarchy columns.

    Args:
        records: Records as fetched, newest first.
        schema_has_hierarchy: Whether the table declares the hierarchy
            columns; decides the source when nothing was fetched.

    Returns:
        HierarchySource: Side holding the authoritative assignments.
    """
    if records:
        if records[0].hierarchy is not None:
            return HierarchySource.BACKEND
        return HierarchySource.LOCAL
    if schema_has_hierarchy:
        return HierarchySource.BACKEND
    return HierarchySource.LOCAL


class DashboardState:
    """Single owner of the in-memory records and hierarchy caches."""

    def __init__(self) -> None:
        self._records: list[Record] = []
        self._index: dict[str, int] = {}
        self._levels: dict[str, Level] = {}
        self._parents: dict[str, str | None] = {}
        self._vers_include: dict[str, bool] = {}
        self.hierarchy_source = HierarchySource.LOCAL
        self._generation = 0
        self._aggregator: Aggregator | None = None
        self._aggregator_generation = -1

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def records(self) -> list[Record]:
        """Records in record store order (newest first)."""
        return list(self._records)

    @property
    def levels(self) -> Mapping[str, Level]:
        return MappingProxyType(self._levels)

    @property
    def parents(self) -> Mapping[str, str | None]:
        return MappingProxyType(self._parents)

    @property
    def vers_include(self) -> Mapping[str, bool]:
        return MappingProxyType(self._vers_include)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._index

    def __len__(self) -> int:
        return len(self._records)

    def get(self, record_id: str) -> Record:
        try:
            return self._records[self._index[record_id]]
        except KeyError as exc:
            raise RecordNotFoundError(record_id) from exc

    def assignment_of(self, record_id: str) -> HierarchyAssignment:
        """Return the cached level and parent of a record."""
        self.get(record_id)
        return HierarchyAssignment(
            level=self._levels.get(record_id, DEFAULT_LEVEL),
            parent_id=self._parents.get(record_id),
        )

    def replace_all(
        self,
        records: Iterable[Record],
        local: LocalHierarchyCache,
        source: HierarchySource,
    ) -> None:
        """Reconcile the whole state with a fresh fetch.

        Args:
            records: Records as returned by the record store.
            local: Locally persisted assignments and inclusion flags.
            source: Which side is authoritative for levels and parents.
        """
        self.hierarchy_source = source
        self._records = []
        self._index = {}
        self._levels = {}
        self._parents = {}
        self._vers_include = {}
        for record in records:
            if record.id in self._index:
                continue
            self._index[record.id] = len(self._records)
            self._records.append(record)
            if (
                source is HierarchySource.BACKEND
                and record.hierarchy is not None
            ):
                self._levels[record.id] = record.hierarchy.level
                self._parents[record.id] = record.hierarchy.parent_id
            else:
                self._levels[record.id] = local.levels.get(
                    record.id,
                    DEFAULT_LEVEL,
                )
                self._parents[record.id] = local.parents.get(record.id)
            self._vers_include[record.id] = local.vers_include.get(
                record.id,
                True,
            )
        self._touch()

    def upsert_record(
        self,
        record: Record,
        assignment: HierarchyAssignment | None = None,
    ) -> None:
        """Insert a record at the top, or replace it in place when known.

        Args:
            record: Record to store.
            assignment: Explicit assignment; when None the record's backend
                assignment is used in backend mode, otherwise existing cache
                entries are kept and defaults fill the gaps.
        """
        if record.id in self._index:
            self._records[self._index[record.id]] = record
        else:
            self._records.insert(0, record)
            self._reindex()
        if assignment is None and (
            self.hierarchy_source is HierarchySource.BACKEND
            and record.hierarchy is not None
        ):
            assignment = record.hierarchy
        if assignment is not None:
            self._levels[record.id] = assignment.level
            self._parents[record.id] = assignment.parent_id
        else:
            self._levels.setdefault(record.id, DEFAULT_LEVEL)
            self._parents.setdefault(record.id, None)
        self._vers_include.setdefault(record.id, True)
        self._touch()

    def set_field(self, record_id: str, field: str, value) -> object:
        """Replace one record field and return its previous value."""
        record = self.get(record_id)
        previous = getattr(record, field)
        self._records[self._index[record_id]] = record.with_field(
            field,
            value,
        )
        self._touch()
        return previous

    def set_assignment(
        self,
        record_id: str,
        assignment: HierarchyAssignment,
    ) -> None:
        self.get(record_id)
        self._levels[record_id] = assignment.level
        self._parents[record_id] = assignment.parent_id
        self._touch()

    def set_vers_include(self, record_id: str, include: bool) -> None:
        self.get(record_id)
        self._vers_include[record_id] = include
        self._touch()

    def remove_record(self, record_id: str) -> None:
        """Drop a record from the snapshot and from every cache."""
        if record_id not in self._index:
            return
        del self._records[self._index[record_id]]
        self._reindex()
        self._levels.pop(record_id, None)
        self._parents.pop(record_id, None)
        self._vers_include.pop(record_id, None)
        self._touch()

    def apply_change(self, event: ChangeEvent) -> None:
        """Apply one confirmed change; the last write for an id wins."""
        if event.op is ChangeOp.DELETE:
            self.remove_record(event.record_id)
            return
        if event.record is None:
            return
        self.upsert_record(event.record)

    def to_local_cache(self) -> LocalHierarchyCache:
        """Return a copy of the caches suitable for local persistence."""
        return LocalHierarchyCache(
            levels=dict(self._levels),
            parents=dict(self._parents),
            vers_include=dict(self._vers_include),
        )

    def tree(self) -> HierarchyTree:
        return self.aggregator().tree

    def aggregator(self) -> Aggregator:
        """Return the aggregator for the current generation."""
        if (
            self._aggregator is None
            or self._aggregator_generation != self._generation
        ):
            tree = build_tree(self._records, self._levels, self._parents)
            self._aggregator = Aggregator(tree, dict(self._vers_include))
            self._aggregator_generation = self._generation
        return self._aggregator

    def _reindex(self) -> None:
        self._index = {
            record.id: position
            for position, record in enumerate(self._records)
        }

    def _touch(self) -> None:
        self._generation += 1


__all__ = ["DashboardState", "HierarchySource", "detect_hierarchy_source"]
