"""Application ports package."""

from .database import DatabaseEnginePort
from .hierarchy_store import HierarchyStorePort, LocalHierarchyCache
from .record_store import RecordStorePort

__all__ = [
    "DatabaseEnginePort",
    "HierarchyStorePort",
    "LocalHierarchyCache",
    "RecordStorePort",
]
