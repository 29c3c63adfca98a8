"""
Timeline view engine.

This module provides TimelineEngine, which lays out an emission set on a
CanvasSurface and keeps the drawing, the pan/zoom state and the emissions
consistent while the user drags things around. Rendering is delegated to
specialized modules:
- grid_builder: Time ruler
- block_layout: Emission blocks, labels and row separators
- pan_controller: Background pan and wheel zoom
- item_drag: Per-block drag to reschedule
- playback: Playback indicator sweep and block pulses

Every structural change rebuilds the whole drawing; only a live external
edit of one start offset moves a single block in place.
"""
import logging

from config_manager import config
from emissions import Emission, EmissionSet
from enums import ElementRole, FIXED_ROLES, MenuAction
from view_state import PanState, ZoomContext
from ui.timeline import block_layout, grid_builder, playback
from ui.timeline.block_layout import BlockEntry, BlockRegistry
from ui.timeline.grid_builder import GridElement
from ui.timeline.host import MenuEntry, TimelineHost
from ui.timeline.item_drag import ItemDragController
from ui.timeline.pan_controller import PanController
from ui.timeline.playback import PlaybackIndicator
from ui.timeline.surface import CanvasItem, CanvasSurface

logger = logging.getLogger(__name__)


class TimelineEngine:
    """Draws an emission set as draggable blocks over a zoomable time ruler.

    Attributes:
        host: Application callbacks (selection, saving, inspector, menus)
        zoom: Scale shared with any other engine given the same context
        pan: This view's accumulated background pan
        surface: The attached surface, None before attach() and after dispose()
        active_set: The emission set currently drawn
        max_extent: Rightmost occupied pixel, never below the configured minimum
        blocks: Block registry of the active set
        grid: Ruler items of the last rebuild
    """

    def __init__(self, host: TimelineHost, zoom: ZoomContext | None = None) -> None:
        self.host = host
        self.zoom = zoom if zoom is not None else ZoomContext()
        self.pan = PanState()

        self.surface: CanvasSurface | None = None
        self.background: CanvasItem | None = None
        self.axis_backdrop: CanvasItem | None = None
        self.playback: PlaybackIndicator | None = None
        self.pan_controller: PanController | None = None

        self.active_set: EmissionSet | None = None
        self.max_extent: float = 0.0
        self.blocks = BlockRegistry()
        self.grid: list[GridElement] = []

        self._roles: dict[CanvasItem, ElementRole] = {}
        self._base_x: dict[CanvasItem, float] = {}

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def attach(self, surface: CanvasSurface) -> None:
        """Create the fixed backdrop and playback indicator on `surface`."""
        if self.surface is not None:
            self.dispose()

        self.surface = surface

        self.background = surface.create_rect(0, 0, surface.width, surface.height)
        self.background.set("fill", config.get_color("background", "#aaaaaa"))
        self.background.set("stroke", config.get_color("background", "#aaaaaa"))
        self._register(self.background, ElementRole.BACKGROUND)

        axis_height = config.get_timeline_setting("axisHeight", 25)
        self.axis_backdrop = surface.create_rect(0, 0, surface.width, axis_height)
        self.axis_backdrop.set("fill", config.get_color("axisBackground", "#777777"))
        self.axis_backdrop.set("stroke", config.get_color("axisBackground", "#777777"))
        self._register(self.axis_backdrop, ElementRole.AXIS_BACKDROP)

        self.playback = PlaybackIndicator(surface)
        self._register(self.playback.line, ElementRole.PLAY_LINE, 0)

        self.pan_controller = PanController(self.pan, self.zoom, self.movable_elements)
        self.pan_controller.attach(self.background)

        self.zoom.add_listener(self._on_scale_changed)
        logger.debug("Timeline attached to %sx%s surface", surface.width, surface.height)

    def dispose(self) -> None:
        """Tear down every item and forget the active set."""
        self.zoom.remove_listener(self._on_scale_changed)
        if self.surface is None:
            return

        if self.playback is not None:
            self.playback.line.stop_animations()
        self.blocks = BlockRegistry()
        self.grid = []
        self.surface.clear()

        self.surface = None
        self.background = None
        self.axis_backdrop = None
        self.playback = None
        self.pan_controller = None
        self.active_set = None
        self.max_extent = 0.0
        self.pan.reset()
        self._roles.clear()
        self._base_x.clear()
        logger.debug("Timeline disposed")

    def resize(self, width: float, height: float) -> None:
        """Resize the surface and backdrop, then rebuild the active set."""
        if self.surface is None:
            return

        self.surface.resize(width, height)
        self.background.set("width", width)
        self.background.set("height", height)
        self.axis_backdrop.set("width", width)
        self.playback.resize(height)

        self.set_set(self.active_set)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def set_set(self, emission_set: EmissionSet | None) -> None:
        """Rebuild the drawing for `emission_set`.

        Passing a different set object than the one drawn starts a playback
        sweep; passing the same object again only redraws.
        """
        if emission_set is None or self.surface is None:
            return

        should_play = emission_set is not self.active_set
        self.active_set = emission_set
        self.max_extent = 0.0
        self.pan.reset()

        self._clear_layers()

        for i, emission in enumerate(emission_set):
            entry = block_layout.build_block(self.surface, self.zoom, emission, i + 1)
            self._wire_block(entry)
            self.blocks.add(entry)
            self.max_extent = max(self.max_extent, entry.right_edge)

        self.max_extent = max(self.max_extent, config.get_timeline_setting("minExtent", 300))

        ticks = grid_builder.compute_ticks(self.max_extent, self.zoom.scale_factor)
        self.grid = grid_builder.build_grid(self.surface, ticks)
        for element in self.grid:
            self._register(element.item, element.role, element.base_x)

        if should_play:
            self.playback.reset()
            self.playback.sweep(self.max_extent, self.zoom.scale_factor)
            for entry in self.blocks:
                playback.pulse_block(entry)
        else:
            self.playback.settle()

        # Blocks, then names, then times stay above the ruler and separators
        for entry in self.blocks:
            entry.rect.bring_to_front()
        for entry in self.blocks:
            entry.name_label.bring_to_front()
        for entry in self.blocks:
            entry.time_label.bring_to_front()

        logger.debug("Rebuilt %d blocks, extent %.1f px, scale %.1f px/s (sweep=%s)",
                     len(self.blocks), self.max_extent, self.zoom.scale_factor, should_play)

    def _wire_block(self, entry: BlockEntry) -> None:
        self._register(entry.rect, ElementRole.BLOCK, entry.base_x)
        self._register(entry.name_label, ElementRole.NAME_LABEL, entry.name_base_x)
        self._register(entry.time_label, ElementRole.TIME_LABEL, entry.time_base_x)
        self._register(entry.separator, ElementRole.SEPARATOR)

        ItemDragController(entry, self.zoom, self.host, lambda: self.blocks).attach()

        emission = entry.emission
        entry.rect.on_context_menu(lambda position: self._show_block_menu(position, emission))

    def _show_block_menu(self, position, emission: Emission) -> None:
        entries: list[MenuEntry | None] = [
            MenuEntry(config.get_string("menu", "clone", "Clone"), MenuAction.CLONE,
                      lambda: self.host.clone_emission(emission)),
            None,
            MenuEntry(config.get_string("menu", "remove", "Remove"), MenuAction.REMOVE,
                      lambda: self.host.remove_emission(emission)),
        ]
        self.host.show_context_menu(position, entries)

    def _clear_layers(self) -> None:
        for entry in self.blocks:
            for item in (entry.rect, entry.name_label, entry.time_label, entry.separator):
                self._forget(item)
        self.blocks.clear()

        for element in self.grid:
            self._forget(element.item)
        grid_builder.clear_grid(self.grid)

    def _register(self, item: CanvasItem, role: ElementRole, base_x: float | None = None) -> None:
        self._roles[item] = role
        if base_x is not None:
            self._base_x[item] = base_x

    def _forget(self, item: CanvasItem) -> None:
        self._roles.pop(item, None)
        self._base_x.pop(item, None)

    def _on_scale_changed(self, scale_factor: float) -> None:
        self.set_set(self.active_set)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def scale_factor(self) -> float:
        return self.zoom.scale_factor

    @property
    def pan_offset(self) -> float:
        return self.pan.committed_offset

    def role_of(self, item: CanvasItem) -> ElementRole | None:
        return self._roles.get(item)

    def base_x_of(self, item: CanvasItem) -> float:
        return self._base_x.get(item, 0.0)

    def movable_elements(self) -> list[tuple[CanvasItem, float]]:
        """Items that follow a background pan, bottom first, with their layout x.

        Background, axis backdrop and row separators stay put.
        """
        if self.surface is None:
            return []
        return [
            (item, self.base_x_of(item))
            for item in self.surface.items()
            if self.role_of(item) not in FIXED_ROLES
        ]

    # ------------------------------------------------------------------
    # External edit notifications
    # ------------------------------------------------------------------

    def on_modifying_emission(self, emission: Emission) -> None:
        """Move the block of `emission` to its edited start offset, leaving all else alone."""
        if self.active_set is None:
            return

        entry = self.blocks.entry_for(emission)
        if entry is None or self.active_set.index_of(emission) == -1:
            logger.debug("Ignoring edit of emission not on the timeline: %s", emission.name)
            return

        delta_ms = emission.start_offset_ms - entry.committed_offset_ms
        entry.translate(entry.settled_dx + self.zoom.ms_to_pixels(delta_ms))

    def on_modified_emission(self, emission: Emission) -> None:
        """Rebuild after an external edit of `emission` is finished."""
        if self.active_set is None:
            return

        if self.active_set.index_of(emission) == -1:
            logger.debug("Ignoring finished edit of emission not on the timeline: %s", emission.name)
            return

        self.set_set(self.active_set)
