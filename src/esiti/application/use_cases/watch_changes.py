"""Use case wiring the record store change feed into the state reducer."""

from collections import deque

from esiti.application.dashboard_state import DashboardState
from esiti.application.ports.record_store import RecordStorePort, Unsubscribe
from esiti.domain.models.events import ChangeEvent, ChangeOp
from esiti.domain.models.records import Record
from esiti.infrastructure.logging.logger import get_app_logger


class WatchChangesUseCase:
    """Queue confirmed changes and apply them from the UI thread.

    Store callbacks only enqueue events. ``drain`` is the single consumer
    that applies them to the state, in arrival order.
    """

    def __init__(
        self,
        store: RecordStorePort,
        state: DashboardState,
        logger=None,
    ) -> None:
        self._store = store
        self._state = state
        self._logger = logger or get_app_logger()
        self._pending: deque[ChangeEvent] = deque()
        self._unsubscribe: Unsubscribe | None = None

    @property
    def pending(self) -> int:
        return len(self._pending)

    def start(self) -> None:
        """Subscribe to the store; calling it twice is a no-op."""
        if self._unsubscribe is not None:
            return
        self._unsubscribe = self._store.subscribe_changes(
            self._on_insert,
            self._on_update,
            self._on_delete,
        )

    def stop(self) -> None:
        if self._unsubscribe is None:
            return
        self._unsubscribe()
        self._unsubscribe = None

    def drain(self) -> int:
        """Apply every pending event and return how many were applied."""
        applied = 0
        while self._pending:
            self._state.apply_change(self._pending.popleft())
            applied += 1
        if applied:
            self._logger.debug(f"Applied {applied} change events")
        return applied

    def _on_insert(self, record: Record) -> None:
        self._pending.append(
            ChangeEvent(op=ChangeOp.INSERT, record_id=record.id, record=record)
        )

    def _on_update(self, record: Record) -> None:
        self._pending.append(
            ChangeEvent(op=ChangeOp.UPDATE, record_id=record.id, record=record)
        )

    def _on_delete(self, record_id: str) -> None:
        self._pending.append(
            ChangeEvent(op=ChangeOp.DELETE, record_id=record_id)
        )


__all__ = ["WatchChangesUseCase"]
