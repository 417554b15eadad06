"""Use case to switch the weekly payments inclusion flag of a record."""

from esiti.application.dashboard_state import DashboardState
from esiti.application.ports.hierarchy_store import HierarchyStorePort


class ToggleVersIncludeUseCase:
    """Set or flip whether a record's weekly payments count in its result."""

    def __init__(
        self,
        hierarchy_store: HierarchyStorePort,
        state: DashboardState,
    ) -> None:
        self._hierarchy_store = hierarchy_store
        self._state = state

    def execute(self, record_id: str, include: bool | None = None) -> bool:
        """Return the flag now in effect; None flips the current value."""
        current = self._state.vers_include.get(record_id, True)
        new_value = (not current) if include is None else include
        self._state.set_vers_include(record_id, new_value)
        self._hierarchy_store.save(self._state.to_local_cache())
        return new_value


__all__ = ["ToggleVersIncludeUseCase"]
