"""Row producers for hierarchical and flat export consumers."""

from esiti.domain.constants import FLAT_EXPORT_HEADERS
from esiti.domain.models.aggregates import NodeValues
from esiti.domain.models.views import ExportRow
from esiti.domain.services.aggregation import Aggregator
from esiti.domain.services.visibility import eligible_children, sorted_roots


def build_export_rows(aggregator: Aggregator) -> list[ExportRow]:
    """Return every displayable node in full-tree order, fully expanded.

    A node with displayed children is followed, after its whole subtree,
    by an aggregate row carrying its subtree totals.

    Args:
        aggregator: Aggregator bound to the tree snapshot to export.

    Returns:
        list[ExportRow]: Rows in traversal order.
    """
    tree = aggregator.tree
    rows: list[ExportRow] = []
    stack = [(root, 0, False) for root in reversed(sorted_roots(tree))]
    while stack:
        record_id, depth, closing = stack.pop()
        if closing:
            rows.append(
                _export_row(
                    aggregator,
                    record_id,
                    depth,
                    aggregator.sum_tree(record_id),
                    is_aggregate_row=True,
                )
            )
            continue
        rows.append(
            _export_row(
                aggregator,
                record_id,
                depth,
                aggregator.value_of(record_id),
                is_aggregate_row=False,
            )
        )
        children = eligible_children(tree, record_id)
        if children:
            stack.append((record_id, depth, True))
            for child in reversed(children):
                stack.append((child, depth + 1, False))
    return rows


def _export_row(
    aggregator: Aggregator,
    record_id: str,
    depth: int,
    values: NodeValues,
    *,
    is_aggregate_row: bool,
) -> ExportRow:
    tree = aggregator.tree
    node = tree.node(record_id)
    parent_name = (
        tree.node(node.parent_id).record.name
        if node.parent_id is not None
        else None
    )
    return ExportRow(
        record=node.record,
        level=node.level,
        parent_name=parent_name,
        negativo=values.negativo,
        cauzione=values.cauzione,
        vers=values.vers,
        disponibilita=values.disponibilita,
        result=values.result,
        depth=depth,
        is_aggregate_row=is_aggregate_row,
    )


def build_flat_export_rows(aggregator: Aggregator) -> list[dict[str, object]]:
    """Return one row per record in record store order, keyed by header."""
    rows = []
    for record in aggregator.tree.records():
        values = aggregator.value_of(record.id)
        rows.append(
            dict(
                zip(
                    FLAT_EXPORT_HEADERS,
                    (
                        record.name.upper(),
                        record.negativo,
                        record.cauzione,
                        record.versamenti_settimanali,
                        record.disponibilita,
                        values.result,
                    ),
                )
            )
        )
    return rows


__all__ = ["build_export_rows", "build_flat_export_rows"]
