"""
conftest.py - Shared pytest fixtures for the emission timeline tests

This module provides standardized test fixtures for use across all tests.
It includes fixtures for:
- Path setup and Python path configuration
- Configuration management
- A recording canvas surface and timeline host for headless engine tests
- Sample emission sets
"""
import os
import sys
import json
import pathlib
import pytest

# Qt widgets are created without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

# Add the src/python directory to the Python path
sys.path.insert(0, str(pathlib.Path(__file__).parent.parent / "src" / "python"))

# Imports from timeline modules (now that path is configured)
from config_manager import ConfigManager
from emissions import Emission, EmissionSet
from ui.timeline.host import TimelineHost
from ui.timeline.surface import CanvasItem, CanvasSurface
from view_state import ZoomContext

TEXT_CHAR_WIDTH = 6
TEXT_HEIGHT = 12


# Recording canvas
# ----------------

class FakeItem(CanvasItem):
    """CanvasItem that stores attributes in a dict and records every call."""

    def __init__(self, surface, kind, attrs):
        self.surface = surface
        self.kind = kind
        self.attrs = dict(attrs)
        self.attrs.setdefault("opacity", 1)
        self.attrs.setdefault("scale", 1)
        self.attrs.setdefault("stroke-width", 1)
        self._translate = (0.0, 0.0)
        self.animations = []
        self.stopped = 0
        self.removed = False
        self.z = surface.next_z()
        self.drag_callbacks = None
        self.context_menu_callback = None
        self.wheel_callback = None
        self.passthrough = False

    def get(self, attr):
        if attr == "translate-x":
            return self._translate[0]
        return self.attrs.get(attr)

    def set(self, attr, value):
        if attr == "translate-x":
            self._translate = (value, self._translate[1])
        else:
            self.attrs[attr] = value

    @property
    def translation(self):
        return self._translate

    def set_translate(self, dx, dy):
        self._translate = (dx, dy)

    def animate(self, attrs, duration_ms, delay_ms=0):
        self.animations.append((dict(attrs), duration_ms, delay_ms))

    def stop_animations(self):
        self.stopped += 1
        self.animations.clear()

    def is_animating(self):
        return bool(self.animations)

    def remove(self):
        self.removed = True
        self.surface.forget(self)

    def bring_to_front(self):
        self.z = self.surface.next_z()

    def on_drag(self, on_move, on_start, on_end):
        self.drag_callbacks = (on_move, on_start, on_end)

    def on_context_menu(self, callback):
        self.context_menu_callback = callback

    def on_wheel(self, callback):
        self.wheel_callback = callback

    def set_pointer_passthrough(self, enabled):
        self.passthrough = enabled

    def rendered_width(self):
        if self.kind == "text":
            return len(str(self.attrs["text"])) * TEXT_CHAR_WIDTH
        return self.attrs["width"]

    def rendered_height(self):
        if self.kind == "text":
            return TEXT_HEIGHT
        return self.attrs["height"]

    # Gesture helpers
    # ---------------

    def drag(self, *deltas):
        """Press, move through each cumulative dx, release."""
        on_move, on_start, on_end = self.drag_callbacks
        on_start(0, 0)
        for dx in deltas:
            on_move(dx, 0)
        on_end()

    @property
    def visual_x(self):
        return self.attrs["x"] + self._translate[0]


class FakeSurface(CanvasSurface):
    """CanvasSurface that keeps its items in memory."""

    def __init__(self, width=800, height=300):
        self._width = width
        self._height = height
        self._items = []
        self._z = 0
        self.resized = []

    def next_z(self):
        self._z += 1
        return self._z

    @property
    def width(self):
        return self._width

    @property
    def height(self):
        return self._height

    def create_rect(self, x, y, w, h, radius=0):
        item = FakeItem(self, "rect", {"x": x, "y": y, "width": w, "height": h, "radius": radius})
        self._items.append(item)
        return item

    def create_text(self, x, y, text):
        item = FakeItem(self, "text", {"x": x, "y": y, "text": text})
        self._items.append(item)
        return item

    def forget(self, item):
        if item in self._items:
            self._items.remove(item)

    def items(self):
        return sorted(self._items, key=lambda item: item.z)

    def resize(self, width, height):
        self._width = width
        self._height = height
        self.resized.append((width, height))

    def clear(self):
        for item in list(self._items):
            item.remove()

    def texts(self):
        return [item for item in self.items() if item.kind == "text"]


class FakeHost(TimelineHost):
    """TimelineHost that records every request."""

    def __init__(self):
        self.calls = []
        self.selected = []
        self.saves = 0
        self.refreshes = 0
        self.menus = []
        self.showing = None

    def select(self, emission):
        self.calls.append("select")
        self.selected.append(emission)

    def save_set(self):
        self.calls.append("save")
        self.saves += 1

    def clone_emission(self, emission):
        self.calls.append(("clone", emission))

    def remove_emission(self, emission):
        self.calls.append(("remove", emission))

    def inspector_is_showing(self, emission):
        return self.showing is emission

    def refresh_inspector(self):
        self.calls.append("refresh")
        self.refreshes += 1

    def show_context_menu(self, position, entries):
        self.menus.append((position, entries))


# Canvas and engine fixtures
# --------------------------

@pytest.fixture
def surface():
    """Provide an 800x300 recording surface."""
    return FakeSurface()


@pytest.fixture
def host():
    return FakeHost()


@pytest.fixture
def zoom():
    """Zoom context at 100 px/s with the default floor and wheel step."""
    return ZoomContext(scale_factor=100, min_scale=30, wheel_step=0.05)


@pytest.fixture
def engine(host, zoom, surface):
    """Timeline engine attached to the recording surface."""
    from ui.timeline.engine import TimelineEngine

    timeline = TimelineEngine(host, zoom)
    timeline.attach(surface)
    yield timeline
    timeline.dispose()


@pytest.fixture
def two_emissions():
    """Set with A at 0 ms and B at 1000 ms."""
    return EmissionSet([Emission("A", 0), Emission("B", 1000)], name="pair")


# Configuration Fixtures
# ---------------------

@pytest.fixture
def test_config_data():
    """Create minimal test configuration data."""
    return {
        "colors": {
            "palette": {
                "background": "#101010",
                "block": "#eeeeee",
            },
            "fonts": {
                "primary": "Arial"
            }
        },
        "strings": {
            "app": {
                "name": "Timeline Test"
            },
            "menu": {
                "clone": "Clone",
                "remove": "Remove"
            }
        },
        "ui": {
            "timeline": {
                "initialScale": 80,
                "minScale": 20,
                "rowHeight": 50
            }
        },
        "logging": {
            "level": "DEBUG",
            "raiseOnError": False
        }
    }


@pytest.fixture
def test_config_files(tmp_path, test_config_data):
    """Create a temporary config file."""
    config_file = tmp_path / "test_config.json"

    with open(config_file, 'w') as f:
        json.dump(test_config_data, f)

    return {
        "config_path": config_file,
        "tmp_path": tmp_path
    }


@pytest.fixture
def test_config_manager(test_config_files):
    """Create a ConfigManager instance with test configuration."""
    return ConfigManager(
        cfg_path=test_config_files["config_path"],
        exit_on_error=False
    )
