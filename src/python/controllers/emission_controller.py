"""Emission controller for the timeline application."""

from typing import Any
from PyQt6.QtCore import QObject, QPoint, QPointF, pyqtSignal
import logging

from emissions import Emission, EmissionSetObserver, EmissionSetStore
from error_handler import EmissionFileError, ErrorHandler
from ui.context_menu import build_context_menu
from ui.inspector import EmissionInspector
from ui.timeline.engine import TimelineEngine
from ui.timeline.host import MenuEntry, TimelineHost
from view_state import ZoomContext

logger = logging.getLogger(__name__)


class TimelineStoreObserver(EmissionSetObserver):
    """Observer that redraws the timeline after the store changes the set."""

    def __init__(self, engine: TimelineEngine) -> None:
        self.engine = engine

    def on_emission_set_changed(self, operation: str, **kwargs: Any) -> None:
        # A loaded set is a new object and gets played back; clone and remove
        # keep the same object so the view only redraws
        if operation == 'load':
            self.engine.set_set(kwargs['emission_set'])
        elif operation in ('clone', 'remove'):
            self.engine.set_set(self.engine.active_set)


class ControllerTimelineHost(TimelineHost):
    """TimelineHost that forwards every request to an EmissionController."""

    def __init__(self, controller: "EmissionController") -> None:
        self.controller = controller

    def select(self, emission: Emission) -> None:
        self.controller.select(emission)

    def save_set(self) -> None:
        self.controller.save_set()

    def clone_emission(self, emission: Emission) -> None:
        self.controller.clone_emission(emission)

    def remove_emission(self, emission: Emission) -> None:
        self.controller.remove_emission(emission)

    def inspector_is_showing(self, emission: Emission) -> bool:
        return self.controller.inspector_is_showing(emission)

    def refresh_inspector(self) -> None:
        self.controller.refresh_inspector()

    def show_context_menu(self, position: Any, entries: list[MenuEntry | None]) -> None:
        self.controller.show_context_menu(position, entries)


class EmissionController(QObject):
    """Connects the emission store, the timeline engine and the inspector."""

    selection_changed = pyqtSignal(object)
    set_saved = pyqtSignal()

    def __init__(
        self,
        store: EmissionSetStore,
        inspector: EmissionInspector | None = None,
        zoom: ZoomContext | None = None
    ) -> None:
        """Initialize EmissionController.

        Args:
            store: Holds the emission set and writes it to disk
            inspector: Detail panel to keep in sync (optional)
            zoom: Scale to share with other timeline views (optional)
        """
        super().__init__()
        self.store = store
        self.inspector = inspector
        self.host = ControllerTimelineHost(self)
        self.engine = TimelineEngine(self.host, zoom)
        self.observer = TimelineStoreObserver(self.engine)
        self.store.add_observer(self.observer)
        self.menu = None

        if self.inspector is not None:
            self.inspector.offset_changing.connect(self.engine.on_modifying_emission)
            self.inspector.offset_changed.connect(self._on_inspector_edit_finished)
            self.inspector.name_changed.connect(self._on_inspector_edit_finished)

    def show_set(self) -> None:
        """Draw the store's current set."""
        self.engine.set_set(self.store.emission_set)

    def load(self, path: str) -> bool:
        """Load an emission set file and draw it; returns False on failure."""
        try:
            self.store.load(path)
        except EmissionFileError as e:
            ErrorHandler.report(e, f"Loading emission set '{path}'", "Load failed")
            return False
        self.select(None)
        return True

    # TimelineHost requests
    # ---------------------

    def select(self, emission: Emission | None) -> None:
        if self.inspector is not None:
            self.inspector.show_emission(emission)
        self.selection_changed.emit(emission)

    def save_set(self) -> None:
        try:
            self.store.save()
        except OSError as e:
            ErrorHandler.report(e, "Saving emission set", "Save failed")
            return
        self.set_saved.emit()

    def clone_emission(self, emission: Emission) -> None:
        try:
            clone = self.store.clone(emission)
        except OSError as e:
            ErrorHandler.report(e, f"Saving clone of '{emission.name}'", "Save failed")
            return
        if clone is not None:
            logger.info("Cloned %s", emission.name)
            self.set_saved.emit()

    def remove_emission(self, emission: Emission) -> None:
        saved = True
        try:
            removed = self.store.remove(emission)
        except OSError as e:
            # The emission is gone from the set even though the file is stale
            ErrorHandler.report(e, f"Saving after removing '{emission.name}'", "Save failed")
            removed, saved = True, False
        if not removed:
            return
        logger.info("Removed %s", emission.name)
        if self.inspector_is_showing(emission):
            self.select(None)
        if saved:
            self.set_saved.emit()

    def inspector_is_showing(self, emission: Emission) -> bool:
        return self.inspector is not None and self.inspector.is_showing(emission)

    def refresh_inspector(self) -> None:
        if self.inspector is not None:
            self.inspector.refresh()

    def show_context_menu(self, position: Any, entries: list[MenuEntry | None]) -> None:
        parent = self.inspector.window() if self.inspector is not None else None
        self.menu = build_context_menu(entries, parent)
        if isinstance(position, QPointF):
            position = position.toPoint()
        if isinstance(position, QPoint):
            self.menu.popup(position)

    def _on_inspector_edit_finished(self, emission: Emission) -> None:
        self.engine.on_modified_emission(emission)
        self.save_set()
