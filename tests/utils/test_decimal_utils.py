"""Tests for Decimal helpers."""

from decimal import Decimal

import pytest

from esiti.utils.decimal_utils import coerce_decimal, parse_amount


def test_coerce_decimal_handles_none_and_numbers():
    assert coerce_decimal(None) == Decimal("0")
    assert coerce_decimal(1.25) == Decimal("1.25")
    value = Decimal("3.10")
    assert coerce_decimal(value) is value


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("12.5", Decimal("12.5")),
        (" 12,5 ", Decimal("12.5")),
        ("-4", Decimal("-4")),
        (3, Decimal("3")),
        ("", Decimal("0")),
        ("abc", Decimal("0")),
        ("1,2,3", Decimal("0")),
        ("NaN", Decimal("0")),
        ("Infinity", Decimal("0")),
        (None, Decimal("0")),
        (True, Decimal("0")),
    ],
)
def test_parse_amount_defaults_to_zero_on_invalid_input(raw, expected):
    assert parse_amount(raw) == expected
