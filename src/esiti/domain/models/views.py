"""Domain models describing rows handed to presentation and export layers."""

from dataclasses import dataclass, field
from decimal import Decimal

from esiti.domain.models.aggregates import NodeValues
from esiti.domain.models.records import Level, Record


@dataclass(frozen=True)
class ViewState:
    """Transient navigation state that only changes what is shown.

    Attributes:
        expanded: Ids of nodes whose eligible children are displayed.
        selected_root_id: Id of the node the view is restricted to.
        search_query: Free-text name filter, flat mode when non-blank.
    """

    expanded: frozenset[str] = field(default_factory=frozenset)
    selected_root_id: str | None = None
    search_query: str = ""


@dataclass(frozen=True)
class VisibleRow:
    """Record id and nesting depth produced by the traversal engine."""

    record_id: str
    depth: int


@dataclass(frozen=True)
class DashboardRow:
    """Render-ready row with own and subtree values."""

    record: Record
    level: Level
    depth: int
    values: NodeValues
    totals: NodeValues
    vers_included: bool
    has_children: bool
    expanded: bool


@dataclass(frozen=True)
class ExportRow:
    """Row consumed by hierarchical CSV/XLSX exporters."""

    record: Record
    level: Level
    parent_name: str | None
    negativo: Decimal
    cauzione: Decimal
    vers: Decimal
    disponibilita: Decimal
    result: Decimal
    depth: int
    is_aggregate_row: bool = False


__all__ = ["ViewState", "VisibleRow", "DashboardRow", "ExportRow"]
