"""Tests for per-node values and subtree aggregation."""

from decimal import Decimal

from conftest import build_record
from esiti.domain.models.aggregates import NodeValues
from esiti.domain.models.records import Level
from esiti.domain.services.aggregation import Aggregator, compute_result
from esiti.domain.services.tree import build_tree


def _sample_aggregator(vers_include=None) -> Aggregator:
    records = [
        build_record("m", negativo="-100", cauzione="30", vers="10"),
        build_record("a", negativo="-20", cauzione="5", vers="100"),
        build_record("u1", negativo="-7", cauzione="2", vers="1"),
        build_record("u2", negativo="0", cauzione="4", vers="3"),
        build_record("solo", negativo="-1"),
    ]
    levels = {"m": Level.MASTER, "a": Level.AGENTE}
    parents = {"a": "m", "u1": "a", "u2": "m"}
    tree = build_tree(records, levels, parents)
    return Aggregator(tree, vers_include or {})


def test_compute_result_sums_negativo_cauzione_and_vers():
    """Rossi: -50 + 10 + 5 should give -35."""
    record = build_record(
        "rossi",
        negativo="-50",
        cauzione="10",
        vers="5",
        disponibilita="100",
    )

    values = compute_result(record)

    assert values.result == Decimal("-35")
    assert values.disponibilita == Decimal("100")


def test_excluded_vers_contributes_zero():
    """A node with vers excluded should not count its weekly payments."""
    aggregator = _sample_aggregator({"a": False})

    own = aggregator.value_of("a")

    assert own.result == Decimal("-15")
    assert own.vers == Decimal("0")
    assert aggregator.includes_vers("a") is False
    assert aggregator.includes_vers("m") is True


def test_leaf_sum_equals_own_value():
    aggregator = _sample_aggregator({"a": False})
    leaf_tree = build_tree(
        [build_record("a", negativo="-20", cauzione="5", vers="100")],
        {"a": Level.AGENTE},
        {},
    )
    leaf = Aggregator(leaf_tree, {"a": False})

    assert leaf.sum_tree("a") == leaf.value_of("a")
    assert leaf.sum_tree("a").result == Decimal("-15")
    assert aggregator.sum_tree("u1") == aggregator.value_of("u1")


def test_sum_tree_adds_every_descendant():
    """Each subtree sum is the own value plus the children's sums."""
    aggregator = _sample_aggregator()
    tree = aggregator.tree

    for record_id in tree:
        expected = aggregator.value_of(record_id)
        for child in tree.children_of(record_id):
            expected = expected + aggregator.sum_tree(child)
        assert aggregator.sum_tree(record_id) == expected

    assert aggregator.sum_tree("m").result == Decimal("28")


def test_aggregation_is_idempotent():
    first = _sample_aggregator({"u1": False})
    second = _sample_aggregator({"u1": False})

    assert first.sum_tree("m") == first.sum_tree("m")
    assert first.sum_tree("m") == second.sum_tree("m")


def test_sum_tree_handles_deep_chains_without_recursion():
    """Very deep chains should aggregate without hitting recursion limits."""
    depth = 5000
    records = [build_record(f"n{i}", cauzione="1") for i in range(depth)]
    parents = {f"n{i}": f"n{i - 1}" for i in range(1, depth)}
    aggregator = Aggregator(build_tree(records, {}, parents), {})

    total = aggregator.sum_tree("n0")

    assert total.cauzione == Decimal(depth)
    assert total.result == Decimal(depth)


def test_node_values_addition_is_componentwise():
    left = NodeValues(Decimal("1"), Decimal("2"), Decimal("3"))
    right = NodeValues(Decimal("10"), Decimal("20"), Decimal("30"))

    total = left + right

    assert total == NodeValues(Decimal("11"), Decimal("22"), Decimal("33"))
