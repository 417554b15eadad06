"""Domain services package."""

from .aggregation import Aggregator, compute_result
from .export import build_export_rows, build_flat_export_rows
from .normalization import normalize_amount, normalize_name, normalize_negativo
from .tree import HierarchyTree, TreeNode, build_tree
from .validation import check_parent, resolve_parent, validate_name
from .visibility import (
    auto_expanded,
    eligible_children,
    expand_from,
    sorted_roots,
    visible_rows,
)

__all__ = [
    "Aggregator",
    "HierarchyTree",
    "TreeNode",
    "auto_expanded",
    "build_export_rows",
    "build_flat_export_rows",
    "build_tree",
    "check_parent",
    "compute_result",
    "eligible_children",
    "expand_from",
    "normalize_amount",
    "normalize_name",
    "normalize_negativo",
    "resolve_parent",
    "sorted_roots",
    "validate_name",
    "visible_rows",
]
