"""Tree builder joining flat records with their hierarchy assignments."""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass

from esiti.domain.constants import DEFAULT_LEVEL
from esiti.domain.errors import RecordNotFoundError
from esiti.domain.models.records import Level, Record


@dataclass(frozen=True)
class TreeNode:
    """Arena entry for a record.

    Attributes:
        record: The record itself.
        level: Assigned level, default applied.
        parent_id: Resolved parent id, None for roots and orphans.
        children: Child ids in record store order.
    """

    record: Record
    level: Level
    parent_id: str | None
    children: tuple[str, ...]


class HierarchyTree:
    """Immutable parent/child index built once per data generation."""

    def __init__(
        self,
        nodes: dict[str, TreeNode],
        roots: tuple[str, ...],
    ) -> None:
        self._nodes = nodes
        self._roots = roots

    @property
    def roots(self) -> tuple[str, ...]:
        """Root ids in record store order."""
        return self._roots

    def node(self, record_id: str) -> TreeNode:
        try:
            return self._nodes[record_id]
        except KeyError as exc:
            raise RecordNotFoundError(record_id) from exc

    def children_of(self, record_id: str) -> tuple[str, ...]:
        return self.node(record_id).children

    def level_of(self, record_id: str) -> Level:
        return self.node(record_id).level

    def parent_of(self, record_id: str) -> str | None:
        return self.node(record_id).parent_id

    def records(self) -> list[Record]:
        """Return the records in record store order."""
        return [node.record for node in self._nodes.values()]

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._nodes

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)


def build_tree(
    records: Iterable[Record],
    levels: Mapping[str, Level],
    parents: Mapping[str, str | None],
) -> HierarchyTree:
    """Build the child index and root set for a snapshot of records.

    Parent references that do not resolve to a record in the snapshot, or
    that point to the record itself, are treated as missing so the record
    becomes a root. A parent cycle in raw data is broken by detaching its
    first member in record order.

    Args:
        records: Records in record store order.
        levels: Level per record id, missing ids default to user.
        parents: Parent id per record id, missing ids have no parent.

    Returns:
        HierarchyTree: Arena of nodes with ordered children and roots.
    """
    by_id: dict[str, Record] = {}
    for record in records:
        by_id.setdefault(record.id, record)
    order = list(by_id)

    resolved: dict[str, str | None] = {}
    for record_id in order:
        parent_id = parents.get(record_id)
        if parent_id is None or parent_id == record_id:
            resolved[record_id] = None
        elif parent_id not in by_id:
            resolved[record_id] = None
        else:
            resolved[record_id] = parent_id
    _break_cycles(order, resolved)

    children: dict[str, list[str]] = {record_id: [] for record_id in order}
    for record_id in order:
        parent_id = resolved[record_id]
        if parent_id is not None:
            children[parent_id].append(record_id)

    nodes = {
        record_id: TreeNode(
            record=by_id[record_id],
            level=levels.get(record_id) or DEFAULT_LEVEL,
            parent_id=resolved[record_id],
            children=tuple(children[record_id]),
        )
        for record_id in order
    }
    roots = tuple(
        record_id for record_id in order if resolved[record_id] is None
    )
    return HierarchyTree(nodes, roots)


def _break_cycles(order: list[str], parents: dict[str, str | None]) -> None:
    position = {record_id: index for index, record_id in enumerate(order)}
    # 0 = unvisited, 1 = on the current path, 2 = done
    state = dict.fromkeys(order, 0)
    for start in order:
        path: list[str] = []
        current: str | None = start
        while current is not None and state[current] == 0:
            state[current] = 1
            path.append(current)
            current = parents[current]
        if current is not None and state[current] == 1:
            cycle = path[path.index(current):]
            head = min(cycle, key=position.__getitem__)
            parents[head] = None
        for record_id in path:
            state[record_id] = 2


__all__ = ["TreeNode", "HierarchyTree", "build_tree"]
