"""Use case to reassign a record's level and parent."""

from esiti.application.dashboard_state import DashboardState
from esiti.application.ports.hierarchy_store import HierarchyStorePort
from esiti.application.ports.record_store import RecordStorePort
from esiti.application.use_cases.hierarchy_sync import persist_hierarchy
from esiti.application.use_cases.load_records import reload_records
from esiti.domain.errors import PersistenceError
from esiti.domain.models.records import HierarchyAssignment, Level
from esiti.domain.policies.hierarchy import validate_assignment
from esiti.domain.services.validation import check_parent, resolve_parent
from esiti.infrastructure.logging.logger import get_app_logger

KEEP_PARENT = object()


class EditHierarchyUseCase:
    """Validate and persist a level/parent reassignment.

    An explicitly chosen parent must satisfy the allowed-parent table or the
    edit is rejected. When only the level changes, the stored parent is
    re-validated against the new level and dropped if it no longer fits.
    Children that may not report to the new level are detached as well.
    A rejected write restores the previous assignments and re-fetches
    the records.
    """

    def __init__(
        self,
        store: RecordStorePort,
        hierarchy_store: HierarchyStorePort,
        state: DashboardState,
        logger=None,
    ) -> None:
        self._store = store
        self._hierarchy_store = hierarchy_store
        self._state = state
        self._logger = logger or get_app_logger()

    def execute(
        self,
        record_id: str,
        level: Level | str,
        parent_id=KEEP_PARENT,
    ) -> HierarchyAssignment:
        """Reassign a record.

        Args:
            record_id: Id of the record to edit.
            level: New level.
            parent_id: New parent id, None for a root; omit to keep the
                current parent when still valid.

        Returns:
            HierarchyAssignment: The assignment now in effect.

        Raises:
            RecordNotFoundError: If the record is not in the state.
            HierarchyAssignmentError: If the chosen parent is not allowed.
            PersistenceError: If the store rejects the update, after the
                state has been reloaded.
        """
        current = self._state.assignment_of(record_id)
        new_level = Level.parse(level, current.level)
        levels = self._state.levels
        if parent_id is KEEP_PARENT:
            new_parent = resolve_parent(
                record_id,
                new_level,
                current.parent_id,
                levels,
                self._logger,
            )
        else:
            new_parent = check_parent(
                record_id,
                new_level,
                parent_id or None,
                levels,
            )

        assignment = HierarchyAssignment(level=new_level, parent_id=new_parent)
        previous = {record_id: current}
        for child_id, child_parent in self._state.parents.items():
            if child_parent == record_id:
                previous[child_id] = self._state.assignment_of(child_id)

        self._state.set_assignment(record_id, assignment)
        changed = [record_id, *self._detach_children(record_id, new_level)]
        try:
            persist_hierarchy(
                self._state,
                self._store,
                self._hierarchy_store,
                changed,
            )
        except PersistenceError:
            self._logger.error(
                f"Hierarchy update failed for {record_id}; reloading"
            )
            for changed_id, old in previous.items():
                self._state.set_assignment(changed_id, old)
            reload_records(
                self._store,
                self._hierarchy_store,
                self._state,
                self._logger,
            )
            raise
        self._logger.info(
            f"Hierarchy of {record_id} set to {new_level.value} "
            f"under {new_parent or 'root'}"
        )
        return assignment

    def _detach_children(self, record_id: str, level: Level) -> list[str]:
        detached = []
        for child_id, parent_id in list(self._state.parents.items()):
            if parent_id != record_id:
                continue
            child_level = self._state.levels[child_id]
            if validate_assignment(child_level, level):
                continue
            self._state.set_assignment(
                child_id,
                HierarchyAssignment(level=child_level, parent_id=None),
            )
            detached.append(child_id)
        if detached:
            self._logger.warning(
                f"Detached {len(detached)} children of {record_id} "
                f"not allowed under {level.value}"
            )
        return detached


__all__ = ["EditHierarchyUseCase", "KEEP_PARENT"]
