"""Application use cases package."""

from .add_record import AddRecordUseCase
from .delete_record import DeleteRecordUseCase
from .edit_hierarchy import KEEP_PARENT, EditHierarchyUseCase
from .get_dashboard_rows import GetDashboardRowsUseCase
from .get_export_rows import GetExportRowsUseCase
from .import_records import (
    ImportRecordsResult,
    ImportRecordsUseCase,
    parse_import_csv,
)
from .load_records import LoadRecordsUseCase
from .toggle_vers_include import ToggleVersIncludeUseCase
from .update_record_field import UpdateRecordFieldUseCase
from .watch_changes import WatchChangesUseCase

__all__ = [
    "AddRecordUseCase",
    "DeleteRecordUseCase",
    "EditHierarchyUseCase",
    "GetDashboardRowsUseCase",
    "GetExportRowsUseCase",
    "ImportRecordsResult",
    "ImportRecordsUseCase",
    "KEEP_PARENT",
    "LoadRecordsUseCase",
    "ToggleVersIncludeUseCase",
    "UpdateRecordFieldUseCase",
    "WatchChangesUseCase",
    "parse_import_csv",
]
