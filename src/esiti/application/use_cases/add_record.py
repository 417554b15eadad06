"""Use case to add a record with its hierarchy assignment."""

from uuid import uuid4

from esiti.application.dashboard_state import DashboardState, HierarchySource
from esiti.application.ports.hierarchy_store import HierarchyStorePort
from esiti.application.ports.record_store import RecordStorePort
from esiti.domain.constants import DEFAULT_LEVEL
from esiti.domain.errors import PersistenceError
from esiti.domain.models.records import (
    HierarchyAssignment,
    Level,
    Record,
    RecordDraft,
)
from esiti.domain.services.normalization import normalize_negativo
from esiti.domain.services.validation import check_parent, validate_name
from esiti.infrastructure.logging.logger import get_app_logger
from esiti.utils.decimal_utils import parse_amount


class AddRecordUseCase:
    """Validate, optimistically cache and insert a new record."""

    def __init__(
        self,
        store: RecordStorePort,
        hierarchy_store: HierarchyStorePort,
        state: DashboardState,
        owner_id: str | None = None,
        logger=None,
    ) -> None:
        """Initialize the use case.

        Args:
            store: Port receiving the insert.
            hierarchy_store: Port persisting local assignments and flags.
            state: In-memory state updated before the store confirms.
            owner_id: Account recorded as creator of new records.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._store = store
        self._hierarchy_store = hierarchy_store
        self._state = state
        self._owner_id = owner_id
        self._logger = logger or get_app_logger()

    def execute(
        self,
        name,
        negativo=None,
        cauzione=None,
        versamenti_settimanali=None,
        disponibilita=None,
        level: Level | str | None = None,
        parent_id: str | None = None,
    ) -> Record:
        """Add a record.

        The entered negativo is stored as -abs(value). The record and its
        assignment enter the state before the insert; a failed insert
        removes them again.

        Args:
            name: Display name, required.
            negativo: Entered deficit magnitude.
            cauzione: Deposit amount.
            versamenti_settimanali: Weekly payments amount.
            disponibilita: Available balance.
            level: Hierarchy level, user when omitted.
            parent_id: Optional parent record id.

        Returns:
            Record: The record as stored.

        Raises:
            ValidationError: If the name is blank.
            HierarchyAssignmentError: If the parent is not allowed.
            PersistenceError: If the store rejects the insert.
        """
        clean_name = validate_name(name)
        resolved_level = Level.parse(level, DEFAULT_LEVEL)
        resolved_parent = check_parent(
            None,
            resolved_level,
            parent_id or None,
            self._state.levels,
        )
        assignment = HierarchyAssignment(
            level=resolved_level,
            parent_id=resolved_parent,
        )
        backend = self._state.hierarchy_source is HierarchySource.BACKEND
        draft = RecordDraft(
            id=str(uuid4()),
            name=clean_name,
            negativo=normalize_negativo(negativo),
            cauzione=parse_amount(cauzione),
            versamenti_settimanali=parse_amount(versamenti_settimanali),
            disponibilita=parse_amount(disponibilita),
            owner_id=self._owner_id,
            hierarchy=assignment if backend else None,
        )

        self._state.upsert_record(draft.to_record(), assignment)
        try:
            stored = self._store.insert(draft)
        except PersistenceError:
            self._state.remove_record(draft.id)
            self._logger.error(f"Insert failed for record '{clean_name}'")
            raise

        self._state.upsert_record(stored, assignment)
        self._hierarchy_store.save(self._state.to_local_cache())
        self._logger.info(
            f"Added record {stored.id} ({resolved_level.value})"
        )
        return stored


__all__ = ["AddRecordUseCase"]
