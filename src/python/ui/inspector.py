"""Detail panel for the selected emission.

The inspector shows the name and start offset of one emission and lets the
user edit them. Offset edits are reported while the value changes and again
once editing is finished, which is what the timeline needs to move the block
live and then rebuild.
"""

from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit, QSpinBox
)
from PyQt6.QtCore import pyqtSignal
import logging
from config_manager import config
from emissions import Emission

logger = logging.getLogger(__name__)

MAX_OFFSET_MS = 24 * 60 * 60 * 1000


class EmissionInspector(QWidget):
    """Name and start offset editor for a single emission.

    Signals:
        offset_changing: The offset spin box value changed (Emission)
        offset_changed: Offset editing finished with a new value (Emission)
        name_changed: The name was edited (Emission)
    """

    offset_changing = pyqtSignal(object)
    offset_changed = pyqtSignal(object)
    name_changed = pyqtSignal(object)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.emission: Emission | None = None
        self._updating = False
        self._edit_start_ms: int | None = None
        self._init_ui()
        self.refresh()

    def _init_ui(self) -> None:
        main_layout = QVBoxLayout()
        self.setLayout(main_layout)

        self.title_label = QLabel(config.get_string("inspector", "title", "Emission"))
        main_layout.addWidget(self.title_label)

        self.empty_label = QLabel(config.get_string("inspector", "empty", "No emission selected"))
        main_layout.addWidget(self.empty_label)

        name_layout = QHBoxLayout()
        self.name_label = QLabel(config.get_string("inspector", "name", "Name"))
        self.name_input = QLineEdit()
        self.name_input.editingFinished.connect(self._on_name_edited)
        name_layout.addWidget(self.name_label)
        name_layout.addWidget(self.name_input)
        main_layout.addLayout(name_layout)

        offset_layout = QHBoxLayout()
        self.offset_label = QLabel(config.get_string("inspector", "startOffset", "Start (ms)"))
        self.offset_input = QSpinBox()
        self.offset_input.setRange(0, MAX_OFFSET_MS)
        self.offset_input.setSingleStep(10)
        self.offset_input.valueChanged.connect(self._on_offset_value_changed)
        self.offset_input.editingFinished.connect(self._on_offset_editing_finished)
        offset_layout.addWidget(self.offset_label)
        offset_layout.addWidget(self.offset_input)
        main_layout.addLayout(offset_layout)

        main_layout.addStretch()

    def show_emission(self, emission: Emission | None) -> None:
        """Display `emission`, or the empty state for None."""
        self.emission = emission
        self._edit_start_ms = None
        self.refresh()

    def is_showing(self, emission: Emission) -> bool:
        return self.emission is emission

    def refresh(self) -> None:
        """Reload the fields from the displayed emission without emitting signals."""
        has_emission = self.emission is not None
        self.empty_label.setVisible(not has_emission)
        self.name_input.setEnabled(has_emission)
        self.offset_input.setEnabled(has_emission)

        self._updating = True
        try:
            if has_emission:
                self.name_input.setText(self.emission.name)
                self.offset_input.setValue(int(self.emission.start_offset_ms))
            else:
                self.name_input.clear()
                self.offset_input.setValue(0)
        finally:
            self._updating = False

    def _on_name_edited(self) -> None:
        if self._updating or self.emission is None:
            return
        name = self.name_input.text().strip()
        if not name or name == self.emission.name:
            return
        self.emission.name = name
        logger.debug("Renamed emission to %s", name)
        self.name_changed.emit(self.emission)

    def _on_offset_value_changed(self, value: int) -> None:
        if self._updating or self.emission is None:
            return
        if self._edit_start_ms is None:
            self._edit_start_ms = self.emission.start_offset_ms
        self.emission.start_offset_ms = int(value)
        self.offset_changing.emit(self.emission)

    def _on_offset_editing_finished(self) -> None:
        if self._updating or self.emission is None or self._edit_start_ms is None:
            return
        changed = self._edit_start_ms != self.emission.start_offset_ms
        self._edit_start_ms = None
        if changed:
            logger.debug("Offset of %s set to %d ms", self.emission.name, self.emission.start_offset_ms)
            self.offset_changed.emit(self.emission)
