"""
View state for the emission timeline: shared zoom scale and per-view pan offset.
"""
import logging
from typing import Callable

from config_manager import config

logger = logging.getLogger(__name__)


class ZoomContext:
    """Pixels-per-second scale shared by every timeline view it is handed to.

    Views that share one context zoom in lockstep: a wheel zoom in any of them
    changes the scale for all, and each registered listener is told to rebuild.
    Give each view its own context to zoom them independently.
    """

    def __init__(
        self,
        scale_factor: float | None = None,
        min_scale: float | None = None,
        wheel_step: float | None = None,
    ) -> None:
        self.min_scale = float(min_scale if min_scale is not None
                               else config.get_timeline_setting("minScale", 30))
        self.wheel_step = float(wheel_step if wheel_step is not None
                                else config.get_timeline_setting("wheelStep", 0.05))
        self.scale_factor = float(scale_factor if scale_factor is not None
                                  else config.get_timeline_setting("initialScale", 100))
        self._listeners: list[Callable[[float], None]] = []
        self._clamp()

    def _clamp(self) -> None:
        if self.scale_factor < self.min_scale:
            self.scale_factor = self.min_scale

    def ms_to_pixels(self, ms: float) -> float:
        """Convert a time offset in milliseconds to a horizontal pixel distance."""
        return ms / 1000 * self.scale_factor

    def pixels_to_ms(self, px: float) -> int:
        """Convert a pixel distance to milliseconds, truncated toward zero."""
        return int(px / self.scale_factor * 1000)

    def set_scale_factor(self, scale_factor: float) -> None:
        """Set the scale directly and notify listeners."""
        self.scale_factor = float(scale_factor)
        self._clamp()
        self._notify()

    def apply_wheel(self, delta_y: float) -> float:
        """Zoom from a wheel event; positive delta zooms out.

        Returns:
            float: The new scale factor (never below min_scale)
        """
        self.scale_factor -= delta_y * self.wheel_step
        self._clamp()
        logger.debug("Wheel delta %s -> scale %.2f px/s", delta_y, self.scale_factor)
        self._notify()
        return self.scale_factor

    def add_listener(self, callback: Callable[[float], None]) -> None:
        """Register a callback invoked with the new scale after every change."""
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[float], None]) -> None:
        """Unregister a scale listener; unknown callbacks are ignored."""
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify(self) -> None:
        for callback in list(self._listeners):
            callback(self.scale_factor)


class PanState:
    """Accumulated horizontal pan of one timeline view."""

    def __init__(self) -> None:
        self.committed_offset: float = 0.0
        self.last_offset: float = 0.0

    def offset_for(self, drag_dx: float) -> float:
        """Offset to apply while a background drag is `drag_dx` pixels along."""
        self.last_offset = drag_dx + self.committed_offset
        return self.last_offset

    def commit(self) -> None:
        """Persist the last applied offset so the next drag continues from it."""
        self.committed_offset = self.last_offset

    def reset(self) -> None:
        self.committed_offset = 0.0
        self.last_offset = 0.0
