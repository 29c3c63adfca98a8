"""
Enumerations for the emission timeline using Python 3.11+ StrEnum.

This module defines string-based enumerations for various constants used
throughout the application, providing type safety and IDE autocomplete support.
"""

from enum import StrEnum


class DragPhase(StrEnum):
    """Phases of a block drag gesture.

    Attributes:
        IDLE: No gesture has happened yet
        DRAGGING: Pointer is down and the block follows it
        COMMITTED: The last gesture wrote a new start offset to the emission
    """
    IDLE = "idle"
    DRAGGING = "dragging"
    COMMITTED = "committed"


class ElementRole(StrEnum):
    """Role of a visual element on the canvas surface.

    Roles listed in FIXED_ROLES never take part in background panning.
    """
    BACKGROUND = "background"
    AXIS_BACKDROP = "axis-backdrop"
    PLAY_LINE = "play-line"
    GRID_LINE = "grid-line"
    GRID_LABEL = "grid-label"
    BLOCK = "block"
    NAME_LABEL = "name-label"
    TIME_LABEL = "time-label"
    SEPARATOR = "separator"


FIXED_ROLES = frozenset({
    ElementRole.BACKGROUND,
    ElementRole.AXIS_BACKDROP,
    ElementRole.SEPARATOR,
})


class MenuAction(StrEnum):
    """Actions offered by the block context menu."""
    CLONE = "clone"
    REMOVE = "remove"
