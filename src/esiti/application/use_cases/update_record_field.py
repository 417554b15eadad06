"""Use case to update a single field of a record."""

from esiti.application.dashboard_state import DashboardState
from esiti.application.ports.hierarchy_store import HierarchyStorePort
from esiti.application.ports.record_store import RecordStorePort
from esiti.application.use_cases.load_records import reload_records
from esiti.domain.constants import EDITABLE_FIELDS
from esiti.domain.errors import PersistenceError, ValidationError
from esiti.domain.models.records import Record
from esiti.domain.services.normalization import normalize_amount
from esiti.domain.services.validation import validate_name
from esiti.infrastructure.logging.logger import get_app_logger


class UpdateRecordFieldUseCase:
    """Optimistic field update, reconciled by a re-fetch on failure."""

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

    def execute(self, record_id: str, field: str, value) -> Record:
        """Update one field of a record.

        Args:
            record_id: Id of the record to update.
            field: One of name, negativo, cauzione, versamenti_settimanali,
                disponibilita.
            value: Raw input; amounts parse freely and default to zero,
                negativo is always stored as -abs(value).

        Returns:
            Record: The record after the update.

        Raises:
            ValidationError: If the field is unknown or the name is blank.
                The state is left untouched.
            RecordNotFoundError: If the record is not in the state.
            PersistenceError: If the store rejects the update, after the
                state has been re-fetched.
        """
        if field not in EDITABLE_FIELDS:
            raise ValidationError(f"Campo non modificabile: {field}")
        self._state.get(record_id)
        if field == "name":
            new_value = validate_name(value)
        else:
            new_value = normalize_amount(field, value)

        self._state.set_field(record_id, field, new_value)
        try:
            self._store.update(record_id, {field: new_value})
        except PersistenceError:
            self._logger.error(
                f"Update of {field} failed for {record_id}; reloading"
            )
            reload_records(
                self._store,
                self._hierarchy_store,
                self._state,
                self._logger,
            )
            raise
        return self._state.get(record_id)


__all__ = ["UpdateRecordFieldUseCase"]
