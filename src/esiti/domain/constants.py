"""Domain constants for weekly outcome records."""

from esiti.domain.models.records import Level

DEFAULT_LEVEL = Level.USER

AMOUNT_FIELDS = (
    "negativo",
    "cauzione",
    "versamenti_settimanali",
    "disponibilita",
)

EDITABLE_FIELDS = ("name", *AMOUNT_FIELDS)

REQUIRED_IMPORT_HEADERS = (
    "name",
    "negativo",
    "cauzione",
    "versamenti_settimanali",
    "disponibilita",
)

OPTIONAL_IMPORT_HEADERS = ("level", "parent_id")

FLAT_EXPORT_HEADERS = (
    "Utente",
    "Negativo",
    "Cauzione",
    "Versamenti Settimanali",
    "Disponibilità Conti Gioco",
    "Risultato",
)


__all__ = [
    "DEFAULT_LEVEL",
    "AMOUNT_FIELDS",
    "EDITABLE_FIELDS",
    "REQUIRED_IMPORT_HEADERS",
    "OPTIONAL_IMPORT_HEADERS",
    "FLAT_EXPORT_HEADERS",
]
