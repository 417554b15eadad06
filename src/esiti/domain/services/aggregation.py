"""Per-node values and subtree aggregates over a hierarchy tree."""

from collections.abc import Mapping
from decimal import Decimal

from esiti.domain.models.aggregates import NodeValues
from esiti.domain.models.records import Record
from esiti.domain.services.tree import HierarchyTree


def compute_result(record: Record, include_vers: bool = True) -> NodeValues:
    """Compute the own values of a record.

    Args:
        record: Record to evaluate.
        include_vers: Whether weekly payments count toward the result.

    Returns:
        NodeValues: Components and result of the record alone.
    """
    vers = record.versamenti_settimanali if include_vers else Decimal("0")
    return NodeValues(
        negativo=record.negativo,
        cauzione=record.cauzione,
        vers=vers,
        disponibilita=record.disponibilita,
        result=record.negativo + record.cauzione + vers,
    )


class Aggregator:
    """Read-only projection of values over one tree snapshot.

    Subtree sums are memoized for the lifetime of the instance; build a new
    aggregator whenever the tree or the inclusion flags change.
    """

    def __init__(
        self,
        tree: HierarchyTree,
        vers_include: Mapping[str, bool],
    ) -> None:
        self._tree = tree
        self._vers_include = vers_include
        self._sums: dict[str, NodeValues] = {}

    @property
    def tree(self) -> HierarchyTree:
        return self._tree

    def includes_vers(self, record_id: str) -> bool:
        return self._vers_include.get(record_id, True)

    def value_of(self, record_id: str) -> NodeValues:
        """Return the node's own values, applying its own inclusion flag."""
        record = self._tree.node(record_id).record
        return compute_result(record, self.includes_vers(record_id))

    def sum_tree(self, record_id: str) -> NodeValues:
        """Return the node's values plus those of all its descendants.

        The walk is post-order with an explicit stack, so tree depth is only
        bounded by the number of records.

        Args:
            record_id: Id of the subtree root.

        Returns:
            NodeValues: Elementwise sum over the subtree.
        """
        cached = self._sums.get(record_id)
        if cached is not None:
            return cached
        stack: list[tuple[str, bool]] = [(record_id, False)]
        while stack:
            current, children_done = stack.pop()
            if current in self._sums:
                continue
            children = self._tree.children_of(current)
            if children_done:
                total = self.value_of(current)
                for child in children:
                    total = total + self._sums[child]
                self._sums[current] = total
                continue
            stack.append((current, True))
            for child in reversed(children):
                if child not in self._sums:
                    stack.append((child, False))
        return self._sums[record_id]


__all__ = ["compute_result", "Aggregator"]
