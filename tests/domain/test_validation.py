"""Tests for domain validation helpers."""

from unittest.mock import MagicMock

import pytest

from esiti.domain.errors import HierarchyAssignmentError, ValidationError
from esiti.domain.models.records import Level
from esiti.domain.services.validation import (
    check_parent,
    resolve_parent,
    validate_name,
)

LEVELS = {
    "m": Level.MASTER,
    "c": Level.COLLABORATORE,
    "u": Level.USER,
}


def test_validate_name_trims_value():
    assert validate_name("  Rossi ") == "Rossi"


@pytest.mark.parametrize("value", ["", "   ", None])
def test_validate_name_rejects_blank_values(value):
    with pytest.raises(ValidationError):
        validate_name(value)


def test_check_parent_accepts_allowed_parent():
    assert check_parent("x", Level.AGENTE, "m", LEVELS) == "m"
    assert check_parent("x", Level.AGENTE, None, LEVELS) is None


def test_check_parent_rejects_disallowed_level():
    with pytest.raises(HierarchyAssignmentError):
        check_parent("x", Level.AGENTE, "c", LEVELS)


def test_check_parent_rejects_self_and_unknown_parent():
    with pytest.raises(HierarchyAssignmentError):
        check_parent("m", Level.USER, "m", LEVELS)
    with pytest.raises(HierarchyAssignmentError):
        check_parent("x", Level.USER, "missing", LEVELS)


def test_resolve_parent_drops_invalid_parent_with_warning():
    logger = MagicMock()

    result = resolve_parent("x", Level.AGENTE, "c", LEVELS, logger)

    assert result is None
    logger.warning.assert_called_once()


def test_resolve_parent_keeps_valid_parent():
    logger = MagicMock()

    assert resolve_parent("x", Level.USER, "c", LEVELS, logger) == "c"
    logger.warning.assert_not_called()
