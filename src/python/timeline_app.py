"""Emission timeline desktop application."""

from PyQt6.QtWidgets import QApplication, QMainWindow, QWidget, QHBoxLayout
from PyQt6.QtCore import QTimer
import logging
import sys

from config_manager import config
from controllers.emission_controller import EmissionController
from emissions import EmissionSetStore
from logging_config import setup_logging
from ui.inspector import EmissionInspector
from ui.timeline.qt_surface import QtCanvasSurface

logger = logging.getLogger(__name__)


class TimelineWindow(QMainWindow):
    """Main window: the timeline canvas with the inspector on its right."""

    def __init__(self, store: EmissionSetStore | None = None) -> None:
        super().__init__()
        self.setWindowTitle(config.get_string("app", "windowTitle", "Emission Timeline"))
        self.resize(
            config.get_ui_setting("window", "width", 1000),
            config.get_ui_setting("window", "height", 400),
        )

        self.store = store if store is not None else EmissionSetStore()
        self.inspector = EmissionInspector()
        self.controller = EmissionController(self.store, self.inspector)

        self.surface = QtCanvasSurface()
        self.controller.engine.attach(self.surface)
        self.surface.on_resized(self.controller.engine.resize)

        main_widget = QWidget()
        layout = QHBoxLayout(main_widget)
        layout.addWidget(self.surface.view, stretch=1)
        self.inspector.setMaximumWidth(260)
        layout.addWidget(self.inspector)
        self.setCentralWidget(main_widget)

    def open_file(self, path: str) -> bool:
        """Load and draw an emission set file."""
        return self.controller.load(path)

    def closeEvent(self, event):
        self.controller.engine.dispose()
        super().closeEvent(event)


def main():
    """Entry point for the timeline application."""
    import argparse

    parser = argparse.ArgumentParser(description='Emission Timeline - schedule emissions on a zoomable timeline')
    parser.add_argument('file', nargs='?', default=None,
                        help='Emission set JSON file to open')
    parser.add_argument('--debug', '-d', action='store_true',
                        help='Enable debug logging')
    args = parser.parse_args()

    setup_logging()

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    app = QApplication(sys.argv)
    app.setApplicationName(config.get_string("app", "name", "Emission Timeline"))

    window = TimelineWindow()
    window.show()

    # Load once the window has its final size so the first sweep is not cut short
    if args.file:
        QTimer.singleShot(0, lambda: window.open_file(args.file))
    else:
        window.controller.show_set()

    sys.exit(app.exec())


if __name__ == '__main__':
    main()
