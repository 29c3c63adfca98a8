"""Drag-to-reschedule interaction for emission blocks.

Each block owns one ItemDragController, a small state machine:

    IDLE/COMMITTED --start--> DRAGGING --end--> COMMITTED

Every release commits and saves, including a click that never moved the
block.

While DRAGGING, a pointer position that would put the emission before time 0
is refused: the block keeps its last accepted position until the pointer
comes back. The live time label and the committed value use the same
truncating conversion, so the number shown at release is the one stored.
"""
import logging
from typing import Callable, Iterable

from config_manager import config
from enums import DragPhase
from view_state import ZoomContext
from ui.timeline.block_layout import BlockEntry, format_time_label
from ui.timeline.host import TimelineHost

logger = logging.getLogger(__name__)


class ItemDragController:
    """Moves one block with the pointer and writes the result to its emission."""

    def __init__(
        self,
        entry: BlockEntry,
        zoom: ZoomContext,
        host: TimelineHost,
        all_blocks: Callable[[], Iterable[BlockEntry]]
    ) -> None:
        """
        Args:
            entry: Block this controller drives
            zoom: Scale used for pixel/millisecond conversion
            host: Receives selection, save and inspector requests
            all_blocks: Returns every block of the view (for exclusive highlight)
        """
        self.entry = entry
        self.zoom = zoom
        self.host = host
        self.all_blocks = all_blocks
        self.phase = DragPhase.IDLE

        # Layout x of the block; drag offsets are relative to it
        self._origin_x = entry.base_x
        # Offset kept from previous gestures, and the last accepted one
        self._settled_px = entry.settled_dx
        self._live_px = entry.settled_dx

    def attach(self) -> None:
        """Wire this controller to the block's drag events."""
        self.entry.rect.on_drag(self.on_move, self.on_start, self.on_end)
        self.entry.drag = self

    def candidate_ms(self, dx: float) -> int:
        """Start offset the block would have after dragging `dx` pixels."""
        return self.zoom.pixels_to_ms(self._origin_x + dx + self._settled_px)

    def on_start(self, x: float = 0.0, y: float = 0.0) -> None:
        rect = self.entry.rect
        rect.set("opacity", config.get_timeline_setting("liftedOpacity", 0.3))

        # Only the dragged block keeps an outline
        for block in self.all_blocks():
            block.rect.set("stroke-width", 0)
        rect.set("stroke-width", config.get_timeline_setting("highlightStroke", 2))

        self._live_px = self._settled_px
        self.phase = DragPhase.DRAGGING
        logger.debug("Drag started on %s", self.entry.emission.name)
        self.host.select(self.entry.emission)

    def on_move(self, dx: float, dy: float = 0.0) -> None:
        if self.phase != DragPhase.DRAGGING:
            return

        ms = self.candidate_ms(dx)
        if ms < 0:
            return

        self._live_px = dx + self._settled_px
        self.entry.translate(self._live_px)
        self.entry.time_label.set("text", format_time_label(ms))

    def on_end(self) -> None:
        if self.phase != DragPhase.DRAGGING:
            return

        self.entry.rect.set("opacity", 1)

        self._settled_px = self._live_px
        emission = self.entry.emission
        emission.start_offset_ms = self.zoom.pixels_to_ms(self._origin_x + self._settled_px)
        self.entry.committed_offset_ms = emission.start_offset_ms
        self.entry.settled_dx = self._settled_px
        self.phase = DragPhase.COMMITTED
        logger.debug("Committed %s at %d ms", emission.name, emission.start_offset_ms)

        self.host.save_set()
        if self.host.inspector_is_showing(emission):
            self.host.refresh_inspector()
