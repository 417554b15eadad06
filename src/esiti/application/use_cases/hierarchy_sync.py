"""Shared persistence helper for hierarchy caches."""

from collections.abc import Iterable

from esiti.application.dashboard_state import DashboardState, HierarchySource
from esiti.application.ports.hierarchy_store import HierarchyStorePort
from esiti.application.ports.record_store import RecordStorePort


def persist_hierarchy(
    state: DashboardState,
    store: RecordStorePort,
    hierarchy_store: HierarchyStorePort,
    record_ids: Iterable[str] = (),
) -> None:
    """Write cached assignments to their authoritative source.

    In backend mode the level and parent of each given record are written
    to the record store. The local map is always saved since it also holds
    the inclusion flags.

    Args:
        state: State holding the caches to persist.
        store: Record store receiving backend-authoritative assignments.
        hierarchy_store: Local assignment map.
        record_ids: Records whose assignment changed.

    Raises:
        PersistenceError: If the record store rejects an update.
    """
    if state.hierarchy_source is HierarchySource.BACKEND:
        for record_id in record_ids:
            assignment = state.assignment_of(record_id)
            store.update(
                record_id,
                {
                    "level": assignment.level.value,
                    "parent_id": assignment.parent_id,
                },
            )
    hierarchy_store.save(state.to_local_cache())


__all__ = ["persist_hierarchy"]
