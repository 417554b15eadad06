"""Domain models package."""

from .aggregates import ZERO_VALUES, NodeValues
from .events import ChangeEvent, ChangeOp
from .records import HierarchyAssignment, Level, Record, RecordDraft
from .views import DashboardRow, ExportRow, ViewState, VisibleRow

__all__ = [
    "ChangeEvent",
    "ChangeOp",
    "DashboardRow",
    "ExportRow",
    "HierarchyAssignment",
    "Level",
    "NodeValues",
    "Record",
    "RecordDraft",
    "ViewState",
    "VisibleRow",
    "ZERO_VALUES",
]
