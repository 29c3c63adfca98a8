"""UI components package for the emission timeline."""

from ui.inspector import EmissionInspector
from ui.context_menu import build_context_menu

__all__ = [
    "EmissionInspector",
    "build_context_menu",
]
