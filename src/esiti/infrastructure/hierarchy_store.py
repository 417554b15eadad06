"""JSON file persistence for locally stored hierarchy assignments."""

import json
import os
from pathlib import Path

from esiti.application.ports.hierarchy_store import (
    HierarchyStorePort,
    LocalHierarchyCache,
)
from esiti.domain.errors import PersistenceError
from esiti.domain.models.records import Level
from esiti.infrastructure.logging.logger import get_app_logger


class JsonHierarchyAssignmentStore(HierarchyStorePort):
    """Hierarchy store writing levels, parents and flags to a JSON file.

    The file holds three objects keyed by record id::

        {"levels": {...}, "parents": {...}, "vers_include": {...}}
    """

    def __init__(self, path: Path, logger=None) -> None:
        """Initialize the store.

        Args:
            path: Location of the JSON file.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._path = Path(path)
        self._logger = logger or get_app_logger()

    @property
    def path(self) -> Path:
        """Return the JSON file location."""
        return self._path

    def load(self) -> LocalHierarchyCache:
        """Return the stored assignments, empty when the file is missing.

        Unreadable files and unknown levels are logged and skipped.
        """
        if not self._path.exists():
            return LocalHierarchyCache()
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            self._logger.warning(
                f"Ignoring unreadable hierarchy file {self._path}: {exc}"
            )
            return LocalHierarchyCache()
        if not isinstance(payload, dict):
            self._logger.warning(
                f"Ignoring malformed hierarchy file {self._path}"
            )
            return LocalHierarchyCache()

        cache = LocalHierarchyCache()
        for record_id, raw_level in _section(payload, "levels").items():
            level = Level.parse(raw_level)
            if level is None:
                self._logger.warning(
                    f"Unknown level '{raw_level}' for record {record_id}"
                )
                continue
            cache.levels[str(record_id)] = level
        for record_id, parent_id in _section(payload, "parents").items():
            cache.parents[str(record_id)] = (
                str(parent_id) if parent_id else None
            )
        for record_id, flag in _section(payload, "vers_include").items():
            cache.vers_include[str(record_id)] = bool(flag)
        return cache

    def save(self, cache: LocalHierarchyCache) -> None:
        """Write the full map, replacing the previous file atomically.

        Raises:
            PersistenceError: If the file cannot be written.
        """
        payload = {
            "levels": {
                record_id: level.value
                for record_id, level in cache.levels.items()
            },
            "parents": dict(cache.parents),
            "vers_include": dict(cache.vers_include),
        }
        tmp_path = self._path.with_name(f"{self._path.name}.tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(
                json.dumps(payload, indent=2, sort_keys=True),
                encoding="utf-8",
            )
            os.replace(tmp_path, self._path)
        except OSError as exc:
            self._logger.error(
                f"Failed to save hierarchy file {self._path}: {exc}"
            )
            raise PersistenceError(
                f"Failed to save hierarchy file {self._path}"
            ) from exc


def _section(payload: dict, key: str) -> dict:
    value = payload.get(key)
    return value if isinstance(value, dict) else {}


__all__ = ["JsonHierarchyAssignmentStore"]
