"""Background drag panning and wheel zooming."""
import logging
from typing import Callable

from view_state import PanState, ZoomContext
from ui.timeline.surface import CanvasItem

logger = logging.getLogger(__name__)

MovableProvider = Callable[[], list[tuple[CanvasItem, float]]]


class PanController:
    """Pans every movable item in lockstep while the background is dragged.

    Each movable item is placed at its layout x plus the pan offset, so items
    never drift apart however many drags are chained.
    """

    def __init__(self, pan: PanState, zoom: ZoomContext, movable: MovableProvider) -> None:
        """
        Args:
            pan: Offset state of the owning view
            zoom: Scale changed by wheel events
            movable: Returns (item, base_x) pairs for everything that pans
        """
        self.pan = pan
        self.zoom = zoom
        self.movable = movable
        self._targets: list[tuple[CanvasItem, float]] = []

    def attach(self, background: CanvasItem) -> None:
        background.on_drag(self.on_move, self.on_start, self.on_end)
        background.on_wheel(self.on_wheel)

    def on_start(self, x: float = 0.0, y: float = 0.0) -> None:
        self._targets = self.movable()

    def on_move(self, dx: float, dy: float = 0.0) -> None:
        offset = self.pan.offset_for(dx)
        for item, base_x in self._targets:
            item.set("x", base_x + offset)

    def on_end(self) -> None:
        self.pan.commit()
        self._targets = []
        logger.debug("Pan offset now %.1f", self.pan.committed_offset)

    def on_wheel(self, delta_y: float) -> None:
        # Scale listeners rebuild every view sharing the zoom context
        self.zoom.apply_wheel(delta_y)
