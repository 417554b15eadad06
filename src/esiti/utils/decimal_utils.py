"""Helpers for Decimal normalization."""

from decimal import Decimal, InvalidOperation


def coerce_decimal(value) -> Decimal:
    """Normalize numeric values to Decimal.

    Args:
        value: Raw numeric value from SQL or adapters.

    Returns:
        Decimal: Normalized numeric value.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def parse_amount(value) -> Decimal:
    """Parse user or CSV input into an amount, defaulting to zero.

    A comma is accepted as decimal separator. Anything that does not parse
    to a finite number becomes zero.

    Args:
        value: Raw input (string, number, Decimal or None).

    Returns:
        Decimal: Parsed amount.
    """
    if value is None or isinstance(value, bool):
        return Decimal("0")
    if isinstance(value, (int, float, Decimal)):
        amount = coerce_decimal(value)
    else:
        cleaned = str(value).strip().replace(",", ".", 1)
        if not cleaned:
            return Decimal("0")
        try:
            amount = Decimal(cleaned)
        except InvalidOperation:
            return Decimal("0")
    if not amount.is_finite():
        return Decimal("0")
    return amount


__all__ = ["coerce_decimal", "parse_amount"]
