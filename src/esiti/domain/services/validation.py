"""Domain validation helpers."""

from collections.abc import Mapping
from logging import Logger

from esiti.domain.errors import HierarchyAssignmentError, ValidationError
from esiti.domain.models.records import Level
from esiti.domain.policies.hierarchy import validate_assignment
from esiti.domain.services.normalization import normalize_name


def validate_name(value) -> str:
    """Return the trimmed name or raise when it is blank.

    Args:
        value: Raw name from a form, an inline edit or an import row.

    Returns:
        str: Trimmed, non-empty name.

    Raises:
        ValidationError: If the name is empty or whitespace only.
    """
    name = normalize_name(value)
    if not name:
        raise ValidationError("Il nome utente non può essere vuoto")
    return name


def check_parent(
    record_id: str | None,
    level: Level,
    parent_id: str | None,
    levels: Mapping[str, Level],
) -> str | None:
    """Validate an explicitly chosen parent.

    Args:
        record_id: Id of the record being assigned, None while adding.
        level: Level the record will have.
        parent_id: Proposed parent id, None for a root.
        levels: Current level of every known record.

    Returns:
        str | None: The accepted parent id.

    Raises:
        HierarchyAssignmentError: If the parent is the record itself, is
            unknown, or has a level the record may not report to.
    """
    if parent_id is None:
        return None
    if parent_id == record_id:
        raise HierarchyAssignmentError("A record cannot be its own parent")
    parent_level = levels.get(parent_id)
    if parent_level is None:
        raise HierarchyAssignmentError(f"Unknown parent: {parent_id}")
    if not validate_assignment(level, parent_level):
        raise HierarchyAssignmentError(
            f"Level {level.value} cannot report to {parent_level.value}"
        )
    return parent_id


def resolve_parent(
    record_id: str | None,
    level: Level,
    parent_id: str | None,
    levels: Mapping[str, Level],
    logger: Logger,
) -> str | None:
    """Re-validate a stored parent, falling back to no parent when invalid.

    Args:
        record_id: Id of the record being checked.
        level: Level the record has after the change.
        parent_id: Parent currently stored for the record.
        levels: Current level of every known record.
        logger: Logger used for warnings.

    Returns:
        str | None: The parent id when still valid, otherwise None.
    """
    try:
        return check_parent(record_id, level, parent_id, levels)
    except HierarchyAssignmentError as exc:
        logger.warning(f"Dropping parent of {record_id}: {exc}")
        return None


__all__ = ["validate_name", "check_parent", "resolve_parent"]
