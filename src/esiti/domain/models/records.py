"""Domain models for weekly outcome records and their hierarchy."""

from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum


class Level(str, Enum):
    """Rank in the referral hierarchy, highest first."""

    MASTER = "master"
    AGENTE = "agente"
    COLLABORATORE = "collaboratore"
    PVR = "pvr"
    USER = "user"

    @property
    def rank(self) -> int:
        """Return the position in the master-to-user order (0 is master)."""
        return _LEVEL_ORDER.index(self)

    @classmethod
    def parse(
        cls,
        value: "str | Level | None",
        default: "Level | None" = None,
    ) -> "Level | None":
        """Parse a raw level value coming from storage or user input.

        Args:
            value: Raw level, case and surrounding whitespace ignored.
            default: Value returned when the input is empty or unknown.

        Returns:
            Level | None: Matching level or the provided default.
        """
        if isinstance(value, Level):
            return value
        if not value:
            return default
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return default


_LEVEL_ORDER = tuple(Level)


@dataclass(frozen=True)
class HierarchyAssignment:
    """Level and parent reference assigned to a record."""

    level: Level = Level.USER
    parent_id: str | None = None


@dataclass(frozen=True)
class Record:
    """A weekly financial outcome entry.

    Attributes:
        id: Immutable identifier assigned at creation.
        name: Display label, never empty.
        negativo: Deficit amount, stored as a non-positive number.
        cauzione: Deposit amount.
        versamenti_settimanali: Weekly payments amount.
        disponibilita: Available balance, informational only.
        owner_id: Account that created the record.
        hierarchy: Assignment read from storage, None when the backend has
            no hierarchy columns.
    """

    id: str
    name: str
    negativo: Decimal
    cauzione: Decimal
    versamenti_settimanali: Decimal
    disponibilita: Decimal
    owner_id: str | None = None
    hierarchy: HierarchyAssignment | None = None

    def with_field(self, field: str, value) -> "Record":
        """Return a copy of the record with one field replaced."""
        return replace(self, **{field: value})


@dataclass(frozen=True)
class RecordDraft:
    """Record payload ready to be inserted into a record store."""

    id: str
    name: str
    negativo: Decimal
    cauzione: Decimal
    versamenti_settimanali: Decimal
    disponibilita: Decimal
    owner_id: str | None = None
    hierarchy: HierarchyAssignment | None = None

    def to_record(self) -> Record:
        """Return the record this draft becomes once stored."""
        return Record(
            id=self.id,
            name=self.name,
            negativo=self.negativo,
            cauzione=self.cauzione,
            versamenti_settimanali=self.versamenti_settimanali,
            disponibilita=self.disponibilita,
            owner_id=self.owner_id,
            hierarchy=self.hierarchy,
        )


__all__ = ["Level", "HierarchyAssignment", "Record", "RecordDraft"]
