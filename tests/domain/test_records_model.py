"""Tests for record models and hierarchy levels."""

from decimal import Decimal

from conftest import build_record
from esiti.domain.models.records import Level, RecordDraft


def test_level_rank_follows_master_to_user_order():
    assert [level.rank for level in Level] == [0, 1, 2, 3, 4]
    assert Level.MASTER.rank < Level.PVR.rank


def test_level_parse_accepts_case_and_whitespace():
    assert Level.parse(" Agente ") is Level.AGENTE
    assert Level.parse(Level.PVR) is Level.PVR


def test_level_parse_falls_back_to_default():
    assert Level.parse("boss", Level.USER) is Level.USER
    assert Level.parse("") is None
    assert Level.parse(None, Level.MASTER) is Level.MASTER


def test_with_field_returns_modified_copy():
    record = build_record("a", name="Old")

    updated = record.with_field("name", "New")

    assert updated.name == "New"
    assert record.name == "Old"


def test_draft_becomes_record_with_same_values():
    draft = RecordDraft(
        id="x",
        name="Rossi",
        negativo=Decimal("-50"),
        cauzione=Decimal("10"),
        versamenti_settimanali=Decimal("5"),
        disponibilita=Decimal("100"),
        owner_id="owner",
    )

    record = draft.to_record()

    assert record.id == "x"
    assert record.owner_id == "owner"
    assert record.hierarchy is None
    assert record.negativo == Decimal("-50")
