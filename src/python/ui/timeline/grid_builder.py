"""Time ruler rendering for the timeline background.

The ruler is a row of thin tick rectangles spaced `scale / ticks_per_second`
pixels apart. Every `ticks_per_second`-th tick is a second mark: it spans the
whole surface height and carries a "<n> (s)" label. The ruler is thrown away
and rebuilt whole whenever the scale or the content extent changes.
"""
from dataclasses import dataclass
import logging

import numpy as np

from config_manager import config
from custom_types import PixelArray
from enums import ElementRole
from ui.timeline.surface import CanvasItem, CanvasSurface

logger = logging.getLogger(__name__)

LABEL_CENTER_Y = 20
LABEL_GAP = 5


@dataclass(frozen=True)
class Tick:
    """Position of one ruler tick; second marks carry their whole-second count."""
    index: int
    x: float
    seconds: int | None = None

    @property
    def is_second(self) -> bool:
        return self.seconds is not None

    @property
    def label(self) -> str | None:
        if self.seconds is None:
            return None
        return f"{self.seconds} (s)"


@dataclass(eq=False)
class GridElement:
    """A created ruler item with the x it was laid out at."""
    item: CanvasItem
    base_x: float
    role: ElementRole


def _ticks_per_second() -> int:
    return int(config.get_timeline_setting("ticksPerSecond", 5))


def tick_spacing(scale_factor: float, ticks_per_second: int | None = None) -> float:
    """Pixel distance between two adjacent ticks."""
    steps = ticks_per_second or _ticks_per_second()
    return scale_factor / steps


def compute_ticks(max_extent: float, scale_factor: float) -> list[Tick]:
    """Lay out the ruler for a content extent of `max_extent` pixels.

    The ruler covers twice the extent so that panning right still shows ticks.

    Args:
        max_extent: Rightmost occupied pixel (already floored by the caller)
        scale_factor: Pixels per second

    Returns:
        list[Tick]: Ticks from x=0 rightwards, in index order
    """
    steps = _ticks_per_second()
    spacing = tick_spacing(scale_factor, steps)
    end = max_extent / spacing * 2
    count = int(np.ceil(end))
    xs: PixelArray = np.arange(count, dtype=np.float64) * spacing
    return [
        Tick(index=i, x=float(x), seconds=(i // steps if i % steps == 0 else None))
        for i, x in enumerate(xs)
    ]


def build_grid(surface: CanvasSurface, ticks: list[Tick]) -> list[GridElement]:
    """Create ruler items for `ticks` on `surface`.

    Returns:
        list[GridElement]: Lines and labels, in creation order
    """
    axis_height = config.get_timeline_setting("axisHeight", 25)
    inset = config.get_timeline_setting("minorTickInset", 15)
    line_color = config.get_color("gridLine", "#999999")
    label_color = config.get_color("gridLabel", "#222222")

    elements: list[GridElement] = []
    for tick in ticks:
        height = surface.height if tick.is_second else axis_height - inset
        line = surface.create_rect(tick.x, 0, 1, height)
        line.set("fill", line_color)
        line.set("stroke-width", 0)
        elements.append(GridElement(line, tick.x, ElementRole.GRID_LINE))

        if tick.is_second:
            text = surface.create_text(0, 0, tick.label)
            text.set("fill", label_color)
            text.set("x", tick.x + LABEL_GAP)
            text.set("y", LABEL_CENTER_Y - text.rendered_height() / 2)
            text.set_pointer_passthrough(True)
            elements.append(GridElement(text, text.get("x"), ElementRole.GRID_LABEL))

    logger.debug("Built ruler: %d ticks, %d items", len(ticks), len(elements))
    return elements


def clear_grid(elements: list[GridElement]) -> None:
    for element in elements:
        element.item.remove()
    elements.clear()
