"""
Type definitions for the emission timeline.

This module defines common types, aliases, and TypedDict structures
used throughout the timeline codebase.
"""

from typing import Any, Callable, TypedDict

import numpy as np
import numpy.typing as npt

# NumPy array type aliases
PixelArray = npt.NDArray[np.float64]  # Tick x positions in pixels

# Canvas callback aliases
DragStartCallback = Callable[[float, float], None]
DragMoveCallback = Callable[[float, float], None]
DragEndCallback = Callable[[], None]
ContextMenuCallback = Callable[[Any], None]
WheelCallback = Callable[[float], None]


class EmissionRecord(TypedDict, total=False):
    """One emission as stored in an emission set file."""
    id: str
    name: str
    startOffsetMs: int


class EmissionSetRecord(TypedDict, total=False):
    """Top-level structure of an emission set file."""
    name: str
    emissions: list[EmissionRecord]

