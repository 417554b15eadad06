"""Rules on which level a record may report to."""

from esiti.domain.models.records import Level


ALLOWED_PARENT_LEVELS: dict[Level, frozenset[Level]] = {
    Level.MASTER: frozenset(),
    Level.AGENTE: frozenset({Level.MASTER}),
    Level.COLLABORATORE: frozenset({Level.MASTER, Level.AGENTE}),
    Level.PVR: frozenset({Level.MASTER, Level.AGENTE, Level.COLLABORATORE}),
    Level.USER: frozenset(
        {Level.MASTER, Level.AGENTE, Level.COLLABORATORE, Level.PVR}
    ),
}


def validate_assignment(child_level: Level, parent_level: Level) -> bool:
    """Return True when a child of child_level may report to parent_level.

    Args:
        child_level: Level of the record being assigned.
        parent_level: Level of the proposed parent.

    Returns:
        bool: True when the combination is allowed.
    """
    return parent_level in ALLOWED_PARENT_LEVELS[child_level]


def allowed_parent_levels(child_level: Level) -> list[Level]:
    """Return the allowed parent levels in hierarchy order."""
    allowed = ALLOWED_PARENT_LEVELS[child_level]
    return [level for level in Level if level in allowed]


def can_have_parent(child_level: Level) -> bool:
    """Return True when the level accepts any parent at all."""
    return bool(ALLOWED_PARENT_LEVELS[child_level])


__all__ = [
    "ALLOWED_PARENT_LEVELS",
    "validate_assignment",
    "allowed_parent_levels",
    "can_have_parent",
]
