"""Use case to produce rows for the export collaborators."""

from esiti.application.dashboard_state import DashboardState
from esiti.domain.models.views import ExportRow
from esiti.domain.services.export import (
    build_export_rows,
    build_flat_export_rows,
)


class GetExportRowsUseCase:
    """Hierarchical and flat export rows over the current state."""

    def __init__(self, state: DashboardState) -> None:
        self._state = state

    def execute(self) -> list[ExportRow]:
        """Return depth-annotated rows in full-tree order, with subtotals."""
        return build_export_rows(self._state.aggregator())

    def flat(self) -> list[dict[str, object]]:
        """Return one row per record in store order for the simple export."""
        return build_flat_export_rows(self._state.aggregator())


__all__ = ["GetExportRowsUseCase"]
