"""Tests for the AddRecordUseCase."""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from conftest import backend_state, build_record, local_state
from esiti.application.dashboard_state import DashboardState
from esiti.application.use_cases.add_record import AddRecordUseCase
from esiti.domain.errors import (
    HierarchyAssignmentError,
    PersistenceError,
    ValidationError,
)
from esiti.domain.models.records import HierarchyAssignment, Level


def _use_case(record_store, hierarchy_store, state):
    return AddRecordUseCase(
        record_store,
        hierarchy_store,
        state,
        owner_id="owner-1",
        logger=MagicMock(),
    )


def test_rossi_is_stored_with_negative_deficit(
    record_store,
    hierarchy_store,
):
    """Entered 50 is stored as -50 and the result is -35."""
    state = DashboardState()

    stored = _use_case(record_store, hierarchy_store, state).execute(
        "Rossi",
        negativo="50",
        cauzione="10",
        versamenti_settimanali="5",
        disponibilita="100",
    )

    assert stored.negativo == Decimal("-50")
    assert stored.owner_id == "owner-1"
    assert record_store.records == [stored]
    assert state.aggregator().value_of(stored.id).result == Decimal("-35")
    assert state.levels[stored.id] is Level.USER
    assert state.vers_include[stored.id] is True
    assert hierarchy_store.saved


def test_new_record_is_prepended_with_its_assignment(
    record_store,
    hierarchy_store,
):
    state = local_state([build_record("m")], levels={"m": Level.MASTER})

    stored = _use_case(record_store, hierarchy_store, state).execute(
        "Agente",
        level="agente",
        parent_id="m",
    )

    assert state.records[0].id == stored.id
    assert state.assignment_of(stored.id) == HierarchyAssignment(
        Level.AGENTE,
        "m",
    )
    assert hierarchy_store.cache.parents[stored.id] == "m"
    assert stored.hierarchy is None


def test_backend_mode_sends_assignment_with_the_insert(
    record_store,
    hierarchy_store,
):
    master = build_record("m", hierarchy=HierarchyAssignment(Level.MASTER))
    state = backend_state([master])

    stored = _use_case(record_store, hierarchy_store, state).execute(
        "Pvr",
        level=Level.PVR,
        parent_id="m",
    )

    assert stored.hierarchy == HierarchyAssignment(Level.PVR, "m")


def test_blank_name_is_rejected_before_insert(hierarchy_store):
    store = MagicMock()
    state = DashboardState()

    with pytest.raises(ValidationError):
        _use_case(store, hierarchy_store, state).execute("   ")

    store.insert.assert_not_called()
    assert len(state) == 0


def test_disallowed_parent_is_rejected(record_store, hierarchy_store):
    state = local_state([build_record("c")], levels={"c": Level.COLLABORATORE})

    with pytest.raises(HierarchyAssignmentError):
        _use_case(record_store, hierarchy_store, state).execute(
            "Agente",
            level=Level.AGENTE,
            parent_id="c",
        )

    assert record_store.records == []


def test_failed_insert_rolls_back_optimistic_entry(
    record_store,
    hierarchy_store,
):
    record_store.fail_writes = True
    state = local_state([build_record("a")])

    with pytest.raises(PersistenceError):
        _use_case(record_store, hierarchy_store, state).execute("Bianchi")

    assert [record.id for record in state.records] == ["a"]
    assert set(state.levels) == {"a"}
    assert hierarchy_store.saved == []
