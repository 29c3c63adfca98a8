"""Collaborators the timeline engine calls back into."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable

from emissions import Emission
from enums import MenuAction


@dataclass
class MenuEntry:
    """One actionable line of a context menu."""
    label: str
    action: MenuAction
    callback: Callable[[], Any]


class TimelineHost(ABC):
    """Application side of the timeline: selection, persistence, inspector and menus."""

    @abstractmethod
    def select(self, emission: Emission) -> None:
        """An emission was picked up by a block drag."""

    @abstractmethod
    def save_set(self) -> None:
        """Persist the active emission set."""

    @abstractmethod
    def clone_emission(self, emission: Emission) -> None:
        pass

    @abstractmethod
    def remove_emission(self, emission: Emission) -> None:
        pass

    @abstractmethod
    def inspector_is_showing(self, emission: Emission) -> bool:
        """Whether the detail view currently displays `emission`."""

    @abstractmethod
    def refresh_inspector(self) -> None:
        pass

    @abstractmethod
    def show_context_menu(self, position: Any, entries: list[MenuEntry | None]) -> None:
        """Present `entries` at `position`; None entries are separators."""
