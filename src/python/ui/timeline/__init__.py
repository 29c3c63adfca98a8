"""Timeline view package.

This package draws an emission set as blocks on a zoomable, pannable time
ruler through the abstract CanvasSurface interface.

Main Components:
    TimelineEngine: Lays out a set and coordinates pan, zoom and drags
    CanvasSurface / CanvasItem: Drawing interface the engine renders through
    TimelineHost: Application callbacks the engine relies on

The Qt implementation of the surface lives in ui.timeline.qt_surface.
"""

from ui.timeline.engine import TimelineEngine
from ui.timeline.host import MenuEntry, TimelineHost
from ui.timeline.surface import CanvasItem, CanvasSurface

__all__ = [
    'TimelineEngine',
    'TimelineHost',
    'MenuEntry',
    'CanvasSurface',
    'CanvasItem',
]
