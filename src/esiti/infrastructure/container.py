"""Composition root for wiring infrastructure adapters."""

from esiti.application.dashboard_state import DashboardState
from esiti.application.ports.database import DatabaseEnginePort
from esiti.application.ports.hierarchy_store import HierarchyStorePort
from esiti.application.ports.record_store import RecordStorePort
from esiti.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from esiti.infrastructure.hierarchy_store import JsonHierarchyAssignmentStore
from esiti.infrastructure.logging.logger import get_app_logger
from esiti.infrastructure.record_store import SqlAlchemyRecordStore
from esiti.infrastructure.settings import EsitiSettings


def build_database_adapter() -> DatabaseEnginePort:
    """Return the database adapter instance."""
    return SqlAlchemyDatabaseEngineAdapter()


def build_settings() -> EsitiSettings:
    """Return settings read from the environment."""
    return EsitiSettings.from_env()


def build_record_store(
    db_port: DatabaseEnginePort | None = None,
    settings: EsitiSettings | None = None,
) -> RecordStorePort:
    """Return the SQL record store."""
    resolved_db = db_port or build_database_adapter()
    resolved_settings = settings or build_settings()
    return SqlAlchemyRecordStore(
        resolved_db,
        table_name=resolved_settings.table_name,
        logger=get_app_logger(),
    )


def build_hierarchy_store(
    settings: EsitiSettings | None = None,
) -> HierarchyStorePort:
    """Return the local hierarchy assignment store."""
    resolved_settings = settings or build_settings()
    return JsonHierarchyAssignmentStore(
        resolved_settings.hierarchy_file,
        logger=get_app_logger(),
    )


def build_dashboard_state() -> DashboardState:
    """Return an empty in-memory dashboard state."""
    return DashboardState()


__all__ = [
    "build_database_adapter",
    "build_settings",
    "build_record_store",
    "build_hierarchy_store",
    "build_dashboard_state",
]
