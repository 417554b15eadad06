"""Use case to read the rows and totals displayed by the dashboard."""

from esiti.application.dashboard_state import DashboardState
from esiti.domain.models.aggregates import NodeValues
from esiti.domain.models.records import Level, Record
from esiti.domain.models.views import DashboardRow, ViewState
from esiti.domain.services.visibility import (
    eligible_children,
    sorted_roots,
    visible_rows,
)


class GetDashboardRowsUseCase:
    """Join visible rows with own values and subtree totals."""

    def __init__(self, state: DashboardState) -> None:
        """Initialize the use case with its required dependencies."""
        self._state = state

    def execute(self, view: ViewState) -> list[DashboardRow]:
        """Return render-ready rows for the given view state.

        Args:
            view: Expansion, selection and search state.

        Returns:
            list[DashboardRow]: Rows in display order.
        """
        aggregator = self._state.aggregator()
        tree = aggregator.tree
        rows = []
        for visible in visible_rows(tree, view):
            record_id = visible.record_id
            node = tree.node(record_id)
            rows.append(
                DashboardRow(
                    record=node.record,
                    level=node.level,
                    depth=visible.depth,
                    values=aggregator.value_of(record_id),
                    totals=aggregator.sum_tree(record_id),
                    vers_included=aggregator.includes_vers(record_id),
                    has_children=bool(eligible_children(tree, record_id)),
                    expanded=record_id in view.expanded,
                )
            )
        return rows

    def root_totals(self) -> list[tuple[Record, Level, NodeValues]]:
        """Return every root with its subtree totals, in level order."""
        aggregator = self._state.aggregator()
        tree = aggregator.tree
        return [
            (
                tree.node(root).record,
                tree.level_of(root),
                aggregator.sum_tree(root),
            )
            for root in sorted_roots(tree)
        ]


__all__ = ["GetDashboardRowsUseCase"]
