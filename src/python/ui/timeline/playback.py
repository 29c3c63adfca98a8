"""Playback indicator sweep and block pulses."""
import logging

from config_manager import config
from ui.timeline.block_layout import BlockEntry
from ui.timeline.surface import CanvasItem, CanvasSurface

logger = logging.getLogger(__name__)


def sweep_duration_ms(max_extent: float, scale_factor: float) -> float:
    """Time for the indicator to cross `max_extent` pixels at `scale_factor` px/s."""
    return max_extent / scale_factor * 1000


class PlaybackIndicator:
    """Full-height marker that sweeps from x=0 to the content extent."""

    def __init__(self, surface: CanvasSurface) -> None:
        self.line: CanvasItem = surface.create_rect(0, 0, 1, surface.height)
        color = config.get_color("playLine", "#999999")
        self.line.set("fill", color)
        self.line.set("stroke", color)
        self.sweeps = 0

    def resize(self, height: float) -> None:
        self.line.set("height", height)

    def reset(self) -> None:
        """Put the marker back at x=0, above everything drawn so far."""
        self.line.stop_animations()
        self.line.set_translate(0, 0)
        self.line.set("x", 0)
        self.line.bring_to_front()

    def settle(self) -> None:
        """Raise the marker after a redraw without interrupting a running sweep."""
        self.line.set("x", 0)
        if not self.line.is_animating():
            self.line.set_translate(0, 0)
        self.line.bring_to_front()

    def sweep(self, max_extent: float, scale_factor: float) -> float:
        """Start a sweep to `max_extent`; returns its duration in ms."""
        duration = sweep_duration_ms(max_extent, scale_factor)
        self.line.animate({"translate-x": max_extent}, duration)
        self.sweeps += 1
        logger.debug("Playback sweep to %.1f px over %.0f ms", max_extent, duration)
        return duration

    def remove(self) -> None:
        self.line.stop_animations()
        self.line.remove()


def pulse_block(entry: BlockEntry) -> None:
    """Make a block swell and flash its outline when the sweep reaches its start."""
    duration = config.get_timeline_setting("pulseDurationMs", 300)
    stroke = config.get_timeline_setting("pulseStroke", 5)
    scale = config.get_timeline_setting("pulseScale", 1.25)
    start = entry.emission.start_offset_ms

    entry.rect.animate({"scale": scale, "stroke-width": stroke}, duration, start)
    entry.rect.animate({"scale": 1, "stroke-width": 0}, duration, start + duration + 1)
