"""Port for the locally persisted hierarchy assignment map."""

from dataclasses import dataclass, field
from typing import Protocol

from esiti.domain.models.records import Level


@dataclass
class LocalHierarchyCache:
    """Levels, parents and inclusion flags keyed by record id."""

    levels: dict[str, Level] = field(default_factory=dict)
    parents: dict[str, str | None] = field(default_factory=dict)
    vers_include: dict[str, bool] = field(default_factory=dict)


class HierarchyStorePort(Protocol):
    """Port exposing read/write access to the local assignment map."""

    def load(self) -> LocalHierarchyCache:
        """Return the persisted map, empty when nothing was saved yet."""

    def save(self, cache: LocalHierarchyCache) -> None:
        """Persist the full map."""


__all__ = ["LocalHierarchyCache", "HierarchyStorePort"]
