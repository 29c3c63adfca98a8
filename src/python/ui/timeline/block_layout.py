"""Emission block creation and the per-view block registry.

Each emission gets one row: a rounded block at its start offset, a name label
above the block centre, a time label below it, and a full-width separator
under the row. The four items are created together and removed together.
"""
from dataclasses import dataclass, field
import logging
from typing import Iterator, TYPE_CHECKING

from config_manager import config
from emissions import Emission
from view_state import ZoomContext
from ui.timeline.surface import CanvasItem, CanvasSurface

if TYPE_CHECKING:
    from ui.timeline.item_drag import ItemDragController

logger = logging.getLogger(__name__)


def format_time_label(ms: int) -> str:
    """Text shown under a block for a start offset."""
    return f"{ms} (ms)"


def centered_x(block_x: float, block_width: float, text_width: float) -> float:
    """Left edge that centres a text of `text_width` inside a block."""
    return block_x + block_width / 2 - text_width / 2


def row_top(index: int) -> float:
    """Top of the block in 1-based row `index`."""
    return config.get_timeline_setting("rowHeight", 40) * index + 1


def separator_y(index: int) -> float:
    """y of the separator drawn under 1-based row `index`."""
    return config.get_timeline_setting("rowHeight", 40) * (index + 1) - 2.5


@dataclass(eq=False)
class BlockEntry:
    """Visual items of one emission plus the positions the view tracks for it.

    base_x / name_base_x / time_base_x are where the items were laid out and
    are what background panning adds its offset to. settled_dx is the
    translation left by the last committed drag, and committed_offset_ms the
    start offset that translation corresponds to.
    """
    emission: Emission
    row: int
    rect: CanvasItem
    name_label: CanvasItem
    time_label: CanvasItem
    separator: CanvasItem
    base_x: float
    name_base_x: float
    time_base_x: float
    committed_offset_ms: int
    settled_dx: float = 0.0
    drag: "ItemDragController | None" = field(default=None, repr=False)

    @property
    def right_edge(self) -> float:
        return self.base_x + self.rect.get("width")

    def moving_items(self) -> tuple[CanvasItem, CanvasItem, CanvasItem]:
        """Items that follow the block when it is dragged or repositioned."""
        return (self.rect, self.name_label, self.time_label)

    def translate(self, dx: float) -> None:
        for item in self.moving_items():
            item.set_translate(dx, 0)

    def remove(self) -> None:
        for item in (self.rect, self.name_label, self.time_label, self.separator):
            item.remove()


class BlockRegistry:
    """Blocks of the active set in row order, looked up by emission identity.

    An emission listed twice in a set gets two rows; lookups return the first,
    matching EmissionSet.index_of.
    """

    def __init__(self) -> None:
        self._entries: list[BlockEntry] = []
        self._by_emission: dict[Emission, BlockEntry] = {}

    def __iter__(self) -> Iterator[BlockEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, entry: BlockEntry) -> None:
        self._entries.append(entry)
        self._by_emission.setdefault(entry.emission, entry)

    def entry_for(self, emission: Emission) -> BlockEntry | None:
        return self._by_emission.get(emission)

    def clear(self) -> None:
        """Remove every block's items from the surface and forget them."""
        for entry in self._entries:
            entry.remove()
        self._entries.clear()
        self._by_emission.clear()


def build_block(surface: CanvasSurface, zoom: ZoomContext, emission: Emission, index: int) -> BlockEntry:
    """Create the items for `emission` in 1-based row `index`.

    Args:
        surface: Surface to draw on
        zoom: Scale used to place the block
        emission: Emission the block represents
        index: 1-based row number

    Returns:
        BlockEntry: The new block (not yet registered or wired to drag)
    """
    width = config.get_timeline_setting("blockWidth", 100)
    height = config.get_timeline_setting("blockHeight", 35)
    radius = config.get_timeline_setting("blockRadius", 16)
    label_offset = config.get_timeline_setting("labelOffset", 10)
    label_color = config.get_color("blockLabel", "#111111")

    rect = surface.create_rect(0, row_top(index), width, height, radius)
    rect.set("fill", config.get_color("block", "#dddddd"))
    rect.set("stroke", config.get_color("blockStroke", "#333333"))
    rect.set("stroke-width", 0)
    rect.set("x", zoom.ms_to_pixels(emission.start_offset_ms))

    x = rect.get("x")
    mid_y = rect.get("y") + height / 2

    # Labels centre themselves using their own rendered size
    name = surface.create_text(0, 0, emission.name)
    name.set("fill", label_color)
    name.set("x", centered_x(x, width, name.rendered_width()))
    name.set("y", mid_y - name.rendered_height() / 2 - label_offset)
    name.set_pointer_passthrough(True)

    time = surface.create_text(0, 0, format_time_label(emission.start_offset_ms))
    time.set("fill", label_color)
    time.set("x", centered_x(x, width, time.rendered_width()))
    time.set("y", mid_y - time.rendered_height() / 2 + label_offset)
    time.set_pointer_passthrough(True)

    separator = surface.create_rect(0, separator_y(index), surface.width, 1)
    separator.set("fill", config.get_color("separator", "#666666"))
    separator.set("stroke", config.get_color("separator", "#666666"))

    return BlockEntry(
        emission=emission,
        row=index,
        rect=rect,
        name_label=name,
        time_label=time,
        separator=separator,
        base_x=x,
        name_base_x=name.get("x"),
        time_base_x=time.get("x"),
        committed_offset_ms=emission.start_offset_ms,
    )
