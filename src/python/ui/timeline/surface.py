"""
Abstract drawing surface for the timeline.

This module provides the CanvasSurface and CanvasItem classes which define
the interface the timeline engine draws through. The engine never talks to a
widget toolkit directly; a concrete surface (QtCanvasSurface for the
application, a recording fake in tests) implements these methods.

Coordinates are surface pixels with the origin at the top-left corner.
Item attributes understood by every implementation:

    x, y, width, height     geometry of the untransformed item
    fill, stroke            colour strings (e.g. '#dddddd')
    stroke-width            outline width in pixels (0 hides the outline)
    opacity                 0.0 to 1.0
    text                    content of text items
    scale                   uniform scale about the item centre
    translate-x             horizontal part of the current translation
"""

from typing import Any

from custom_types import (
    ContextMenuCallback,
    DragEndCallback,
    DragMoveCallback,
    DragStartCallback,
    WheelCallback,
)


class CanvasItem:
    """
    Handle to one shape or text element on a CanvasSurface.

    Handles stay valid until remove() is called or the surface is cleared.
    """

    def get(self, attr: str) -> Any:
        """
        Read an attribute.

        Args:
            attr: Attribute name (see module docstring)

        Raises:
            NotImplementedError: Subclasses must implement this method
        """
        raise NotImplementedError("Subclasses must implement get")

    def set(self, attr: str, value: Any) -> None:
        """
        Write an attribute, taking effect immediately.

        Raises:
            NotImplementedError: Subclasses must implement this method
        """
        raise NotImplementedError("Subclasses must implement set")

    @property
    def translation(self) -> tuple[float, float]:
        """Current translation applied on top of x/y."""
        raise NotImplementedError("Subclasses must implement translation")

    def set_translate(self, dx: float, dy: float) -> None:
        """
        Replace the item's translation.

        The translation is absolute, not cumulative: calling
        set_translate(10, 0) twice leaves the item 10 pixels right of x.

        Raises:
            NotImplementedError: Subclasses must implement this method
        """
        raise NotImplementedError("Subclasses must implement set_translate")

    def animate(self, attrs: dict[str, float], duration_ms: float, delay_ms: float = 0) -> None:
        """
        Animate numeric attributes from their current values to `attrs`.

        Args:
            attrs: Target values keyed by attribute name
            duration_ms: Length of the animation in milliseconds
            delay_ms: Time to wait before the animation starts

        Raises:
            NotImplementedError: Subclasses must implement this method
        """
        raise NotImplementedError("Subclasses must implement animate")

    def stop_animations(self) -> None:
        """Cancel running and pending animations, keeping current values."""
        raise NotImplementedError("Subclasses must implement stop_animations")

    def is_animating(self) -> bool:
        """True while an animation is running or waiting for its delay."""
        raise NotImplementedError("Subclasses must implement is_animating")

    def remove(self) -> None:
        """Remove the item from its surface."""
        raise NotImplementedError("Subclasses must implement remove")

    def bring_to_front(self) -> None:
        """Raise the item above every other item on the surface."""
        raise NotImplementedError("Subclasses must implement bring_to_front")

    def on_drag(
        self,
        on_move: DragMoveCallback,
        on_start: DragStartCallback,
        on_end: DragEndCallback
    ) -> None:
        """
        Register drag callbacks for the primary pointer button.

        on_start receives the pointer position, on_move the cumulative
        (dx, dy) since the gesture started, on_end nothing.

        Raises:
            NotImplementedError: Subclasses must implement this method
        """
        raise NotImplementedError("Subclasses must implement on_drag")

    def on_context_menu(self, callback: ContextMenuCallback) -> None:
        """Register a callback for secondary-button clicks (receives the screen position)."""
        raise NotImplementedError("Subclasses must implement on_context_menu")

    def on_wheel(self, callback: WheelCallback) -> None:
        """Register a callback for vertical wheel events (positive delta scrolls down)."""
        raise NotImplementedError("Subclasses must implement on_wheel")

    def set_pointer_passthrough(self, enabled: bool) -> None:
        """Let pointer events fall through to the items below."""
        raise NotImplementedError("Subclasses must implement set_pointer_passthrough")

    def rendered_width(self) -> float:
        """Width of the item as drawn (text items measure their glyphs)."""
        raise NotImplementedError("Subclasses must implement rendered_width")

    def rendered_height(self) -> float:
        """Height of the item as drawn."""
        raise NotImplementedError("Subclasses must implement rendered_height")


class CanvasSurface:
    """
    Drawing surface that creates and orders CanvasItems.
    """

    @property
    def width(self) -> float:
        raise NotImplementedError("Subclasses must implement width")

    @property
    def height(self) -> float:
        raise NotImplementedError("Subclasses must implement height")

    def create_rect(self, x: float, y: float, w: float, h: float, radius: float = 0) -> CanvasItem:
        """
        Create a rectangle on top of every existing item.

        Args:
            x: Left edge in pixels
            y: Top edge in pixels
            w: Width in pixels
            h: Height in pixels
            radius: Corner radius in pixels

        Raises:
            NotImplementedError: Subclasses must implement this method
        """
        raise NotImplementedError("Subclasses must implement create_rect")

    def create_text(self, x: float, y: float, text: str) -> CanvasItem:
        """
        Create a text item whose bounding box starts at (x, y).

        Raises:
            NotImplementedError: Subclasses must implement this method
        """
        raise NotImplementedError("Subclasses must implement create_text")

    def items(self) -> list[CanvasItem]:
        """All live items in draw order, bottom first."""
        raise NotImplementedError("Subclasses must implement items")

    def resize(self, width: float, height: float) -> None:
        """Resize the drawing area."""
        raise NotImplementedError("Subclasses must implement resize")

    def clear(self) -> None:
        """Remove every item from the surface."""
        raise NotImplementedError("Subclasses must implement clear")
