"""Domain models for computed record values."""

from dataclasses import dataclass
from decimal import Decimal


_ZERO = Decimal("0")


@dataclass(frozen=True)
class NodeValues:
    """Monetary components of a node, own or aggregated.

    Attributes:
        negativo: Sum of deficit amounts.
        cauzione: Sum of deposits.
        vers: Sum of weekly payments that were included.
        disponibilita: Sum of available balances.
        result: Sum of results.
    """

    negativo: Decimal = _ZERO
    cauzione: Decimal = _ZERO
    vers: Decimal = _ZERO
    disponibilita: Decimal = _ZERO
    result: Decimal = _ZERO

    def __add__(self, other: "NodeValues") -> "NodeValues":
        if not isinstance(other, NodeValues):
            return NotImplemented
        return NodeValues(
            negativo=self.negativo + other.negativo,
            cauzione=self.cauzione + other.cauzione,
            vers=self.vers + other.vers,
            disponibilita=self.disponibilita + other.disponibilita,
            result=self.result + other.result,
        )


ZERO_VALUES = NodeValues()


__all__ = ["NodeValues", "ZERO_VALUES"]
