"""Use case to fetch every record and reconcile the in-memory state."""

from esiti.application.dashboard_state import (
    DashboardState,
    detect_hierarchy_source,
)
from esiti.application.ports.hierarchy_store import HierarchyStorePort
from esiti.application.ports.record_store import RecordStorePort
from esiti.domain.errors import PersistenceError
from esiti.domain.models.records import Record
from esiti.infrastructure.logging.logger import get_app_logger


class LoadRecordsUseCase:
    """Full fetch, hierarchy source detection and state reconciliation."""

    def __init__(
        self,
        store: RecordStorePort,
        hierarchy_store: HierarchyStorePort,
        state: DashboardState,
        logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            store: Port providing the records.
            hierarchy_store: Port providing locally persisted assignments.
            state: In-memory state to reconcile.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._store = store
        self._hierarchy_store = hierarchy_store
        self._state = state
        self._logger = logger or get_app_logger()

    def execute(self) -> list[Record]:
        """Replace the state with the store's current content.

        Returns:
            list[Record]: Records in store order.
        """
        records = self._store.list_records()
        source = detect_hierarchy_source(
            records,
            schema_has_hierarchy=(
                not records and self._store.has_hierarchy_columns()
            ),
        )
        local = self._hierarchy_store.load()
        self._state.replace_all(records, local, source)
        self._logger.info(
            f"Loaded {len(records)} records "
            f"(hierarchy source: {source.value})"
        )
        return self._state.records


def reload_records(
    store: RecordStorePort,
    hierarchy_store: HierarchyStorePort,
    state: DashboardState,
    logger,
) -> None:
    """Re-fetch everything after a rejected write.

    A failing fetch is logged and leaves the state as it is.
    """
    try:
        LoadRecordsUseCase(
            store,
            hierarchy_store,
            state,
            logger=logger,
        ).execute()
    except PersistenceError as exc:
        logger.error(f"Reload after failed write failed: {exc}")


__all__ = ["LoadRecordsUseCase", "reload_records"]
