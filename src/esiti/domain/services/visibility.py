"""Traversal producing the ordered, depth-tagged rows to display."""

from collections.abc import Collection

from esiti.domain.models.records import Level
from esiti.domain.models.views import ViewState, VisibleRow
from esiti.domain.services.tree import HierarchyTree


def eligible_children(tree: HierarchyTree, record_id: str) -> list[str]:
    """Return displayable children of a node in sibling order.

    Only children ranked strictly below the parent are eligible. PVR
    children come first, the others follow in level order; ties keep
    record store order.

    Args:
        tree: Tree snapshot.
        record_id: Id of the parent node.

    Returns:
        list[str]: Ordered child ids.
    """
    parent_rank = tree.level_of(record_id).rank
    eligible = [
        child
        for child in tree.children_of(record_id)
        if tree.level_of(child).rank > parent_rank
    ]
    return sorted(eligible, key=lambda child: _sibling_key(tree, child))


def _sibling_key(tree: HierarchyTree, record_id: str) -> tuple[int, int]:
    level = tree.level_of(record_id)
    return (0 if level is Level.PVR else 1, level.rank)


def sorted_roots(tree: HierarchyTree) -> list[str]:
    """Return root ids ordered by level, ties in record store order."""
    return sorted(tree.roots, key=lambda root: tree.level_of(root).rank)


def expand_from(
    tree: HierarchyTree,
    start_ids: list[str],
    expanded: Collection[str],
) -> list[VisibleRow]:
    """Emit each start node at depth 0 followed by its expanded descendants.

    Args:
        tree: Tree snapshot.
        start_ids: Nodes emitted at depth 0, in order.
        expanded: Ids whose eligible children are shown.

    Returns:
        list[VisibleRow]: Pre-order rows.
    """
    rows: list[VisibleRow] = []
    stack = [(record_id, 0) for record_id in reversed(start_ids)]
    while stack:
        record_id, depth = stack.pop()
        rows.append(VisibleRow(record_id=record_id, depth=depth))
        if record_id not in expanded:
            continue
        for child in reversed(eligible_children(tree, record_id)):
            stack.append((child, depth + 1))
    return rows


def visible_rows(tree: HierarchyTree, view: ViewState) -> list[VisibleRow]:
    """Flatten the tree into the rows to render for the given view state.

    Search mode wins over subtree mode, which wins over the full tree. In
    search mode every record whose name contains the query, ignoring case,
    is returned at depth 0 in record store order. A selected root that is
    no longer in the tree falls back to the full tree.

    Args:
        tree: Tree snapshot.
        view: Expansion, selection and search state.

    Returns:
        list[VisibleRow]: Rows in display order.
    """
    query = view.search_query.strip().lower()
    if query:
        return [
            VisibleRow(record_id=record.id, depth=0)
            for record in tree.records()
            if query in record.name.lower()
        ]
    if view.selected_root_id is not None and view.selected_root_id in tree:
        return expand_from(tree, [view.selected_root_id], view.expanded)
    return expand_from(tree, sorted_roots(tree), view.expanded)


def auto_expanded(
    tree: HierarchyTree,
    expanded: frozenset[str],
) -> frozenset[str]:
    """Expand the only root when nothing has been expanded yet."""
    if not expanded and len(tree.roots) == 1:
        return frozenset(tree.roots)
    return expanded


__all__ = [
    "eligible_children",
    "sorted_roots",
    "expand_from",
    "visible_rows",
    "auto_expanded",
]
