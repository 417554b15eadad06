"""Domain normalization helpers."""

from decimal import Decimal

from esiti.utils.decimal_utils import parse_amount


def normalize_negativo(value) -> Decimal:
    """Return the entered magnitude as a non-positive deficit.

    Args:
        value: Raw amount, sign ignored.

    Returns:
        Decimal: -abs(value), zero when the input does not parse.
    """
    amount = -abs(parse_amount(value))
    # Avoid storing Decimal("-0").
    return amount if amount else Decimal("0")


def normalize_amount(field: str, value) -> Decimal:
    """Parse an amount for a record field, applying the negativo sign rule."""
    if field == "negativo":
        return normalize_negativo(value)
    return parse_amount(value)


def normalize_name(value) -> str:
    """Return a trimmed display name, empty string for None."""
    if value is None:
        return ""
    return str(value).strip()


__all__ = ["normalize_negativo", "normalize_amount", "normalize_name"]
