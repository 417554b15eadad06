"""Use case to delete a confirmed record."""

from esiti.application.dashboard_state import DashboardState
from esiti.application.ports.hierarchy_store import HierarchyStorePort
from esiti.application.ports.record_store import RecordStorePort
from esiti.infrastructure.logging.logger import (
    get_app_logger,
    get_usage_logger,
)


class DeleteRecordUseCase:
    """Remove a record from the store and from every local cache.

    Children are not deleted; they become roots on the next tree build.
    """

    def __init__(
        self,
        store: RecordStorePort,
        hierarchy_store: HierarchyStorePort,
        state: DashboardState,
        logger=None,
        usage_logger=None,
    ) -> None:
        self._store = store
        self._hierarchy_store = hierarchy_store
        self._state = state
        self._logger = logger or get_app_logger()
        self._usage_logger = usage_logger or get_usage_logger()

    def execute(self, record_id: str, confirmed: bool) -> bool:
        """Delete the record once the caller has confirmed.

        Args:
            record_id: Id of the record to delete.
            confirmed: Outcome of the external confirmation step.

        Returns:
            bool: True when the record was deleted.

        Raises:
            RecordNotFoundError: If the record is not in the state.
            PersistenceError: If the store rejects the delete; the state is
                left untouched.
        """
        record = self._state.get(record_id)
        if not confirmed:
            return False
        self._store.delete(record_id)
        self._state.remove_record(record_id)
        self._hierarchy_store.save(self._state.to_local_cache())
        self._logger.info(f"Deleted record {record_id} ({record.name})")
        self._usage_logger.info(f"Deleted record {record.name}")
        return True


__all__ = ["DeleteRecordUseCase"]
