"""Qt presentation of timeline context menus."""

from PyQt6.QtWidgets import QMenu, QWidget
import logging

from ui.timeline.host import MenuEntry

logger = logging.getLogger(__name__)


def build_context_menu(entries: list[MenuEntry | None], parent: QWidget | None = None) -> QMenu:
    """Build a QMenu for `entries`; None entries become separators.

    Args:
        entries: Menu lines in display order
        parent: Owner of the menu

    Returns:
        QMenu: Menu whose actions call the entry callbacks when triggered
    """
    menu = QMenu(parent)
    for entry in entries:
        if entry is None:
            menu.addSeparator()
            continue
        action = menu.addAction(entry.label)
        action.setData(str(entry.action))
        action.triggered.connect(lambda checked=False, cb=entry.callback: cb())
    return menu
