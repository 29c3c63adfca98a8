"""PyQtGraph-backed canvas surface.

QtCanvasSurface draws into a pyqtgraph GraphicsView whose scene coordinates
are view pixels. Items are QGraphicsRectItem / QGraphicsSimpleTextItem
subclasses that forward pointer events to the callbacks registered through
the CanvasItem interface.
"""
from typing import Any, Callable, Optional
import logging

import pyqtgraph as pg
from PyQt6.QtCore import (
    QAbstractAnimation,
    QParallelAnimationGroup,
    QPauseAnimation,
    QPointF,
    QRectF,
    QSequentialAnimationGroup,
    QVariantAnimation,
    Qt,
)
from PyQt6.QtGui import QFont, QTransform
from PyQt6.QtWidgets import (
    QGraphicsItem,
    QGraphicsRectItem,
    QGraphicsSimpleTextItem,
    QWidget,
)

from config_manager import config
from ui.timeline.surface import CanvasItem, CanvasSurface

logger = logging.getLogger(__name__)

ANIMATABLE = ("x", "y", "width", "height", "opacity", "stroke-width", "scale", "translate-x")


class _PointerForwarding:
    """Mouse, context-menu and wheel handling shared by rect and text graphics."""

    owner: "QtCanvasItem"
    _press_pos: Optional[QPointF] = None

    def mousePressEvent(self, event):
        """Start a drag if the owner has drag callbacks."""
        if event.button() == Qt.MouseButton.LeftButton and self.owner.drag_callbacks is not None:
            self._press_pos = event.scenePos()
            _, on_start, _ = self.owner.drag_callbacks
            on_start(self._press_pos.x(), self._press_pos.y())
            event.accept()
        else:
            event.ignore()

    def mouseMoveEvent(self, event):
        """Report the drag delta since the press."""
        if self._press_pos is not None and self.owner.drag_callbacks is not None:
            on_move, _, _ = self.owner.drag_callbacks
            delta = event.scenePos() - self._press_pos
            on_move(delta.x(), delta.y())
            event.accept()
        else:
            event.ignore()

    def mouseReleaseEvent(self, event):
        """Finish the drag."""
        if event.button() == Qt.MouseButton.LeftButton and self._press_pos is not None:
            self._press_pos = None
            if self.owner.drag_callbacks is not None:
                _, _, on_end = self.owner.drag_callbacks
                on_end()
            event.accept()
        else:
            event.ignore()

    def contextMenuEvent(self, event):
        if self.owner.context_menu_callback is not None:
            self.owner.context_menu_callback(event.screenPos())
            event.accept()
        else:
            event.ignore()

    def wheelEvent(self, event):
        if self.owner.wheel_callback is not None and event.orientation() == Qt.Orientation.Vertical:
            # Qt reports wheel-up as positive; callbacks expect scroll-down positive
            self.owner.wheel_callback(-event.delta())
            event.accept()
        else:
            event.ignore()


class _RectGraphic(_PointerForwarding, QGraphicsRectItem):
    """Rectangle with optional rounded corners."""

    def __init__(self, owner: "QtCanvasItem", radius: float = 0) -> None:
        super().__init__()
        self.owner = owner
        self.radius = radius

    def paint(self, painter, option, widget=None):
        painter.setPen(self.pen())
        painter.setBrush(self.brush())
        if self.radius > 0:
            painter.drawRoundedRect(self.rect(), self.radius, self.radius)
        else:
            painter.drawRect(self.rect())


class _TextGraphic(_PointerForwarding, QGraphicsSimpleTextItem):
    """Single-line text."""

    def __init__(self, owner: "QtCanvasItem", text: str) -> None:
        super().__init__(text)
        self.owner = owner


class QtCanvasItem(CanvasItem):
    """CanvasItem backed by a QGraphicsItem in a QtCanvasSurface scene."""

    def __init__(self, surface: "QtCanvasSurface") -> None:
        self.surface = surface
        self.graphic: QGraphicsItem | None = None
        self.drag_callbacks = None
        self.context_menu_callback = None
        self.wheel_callback = None
        self._translate = (0.0, 0.0)
        self._scale = 1.0
        self._stroke_color = config.get_color("blockStroke", "#333333")
        self._stroke_width = 0.0
        self._animations: list[QSequentialAnimationGroup] = []

    @property
    def is_text(self) -> bool:
        return isinstance(self.graphic, QGraphicsSimpleTextItem)

    # Attribute access
    # ----------------

    def get(self, attr: str) -> Any:
        g = self.graphic
        if attr == "x":
            return g.pos().x()
        if attr == "y":
            return g.pos().y()
        if attr == "width":
            return g.boundingRect().width() if self.is_text else g.rect().width()
        if attr == "height":
            return g.boundingRect().height() if self.is_text else g.rect().height()
        if attr == "fill":
            return g.brush().color().name()
        if attr == "stroke":
            return self._stroke_color
        if attr == "stroke-width":
            return self._stroke_width
        if attr == "opacity":
            return g.opacity()
        if attr == "text":
            return g.text() if self.is_text else None
        if attr == "scale":
            return self._scale
        if attr == "translate-x":
            return self._translate[0]
        raise KeyError(f"Unknown canvas attribute: {attr}")

    def set(self, attr: str, value: Any) -> None:
        g = self.graphic
        if attr == "x":
            g.setPos(float(value), g.pos().y())
        elif attr == "y":
            g.setPos(g.pos().x(), float(value))
        elif attr in ("width", "height"):
            if self.is_text:
                return
            rect = g.rect()
            if attr == "width":
                rect.setWidth(float(value))
            else:
                rect.setHeight(float(value))
            g.setRect(rect)
            self._apply_transform()
        elif attr == "fill":
            g.setBrush(pg.mkBrush(value))
        elif attr == "stroke":
            self._stroke_color = value
            self._apply_pen()
        elif attr == "stroke-width":
            self._stroke_width = float(value)
            self._apply_pen()
        elif attr == "opacity":
            g.setOpacity(float(value))
        elif attr == "text":
            if self.is_text:
                g.setText(str(value))
        elif attr == "scale":
            self._scale = float(value)
            self._apply_transform()
        elif attr == "translate-x":
            self.set_translate(float(value), self._translate[1])
        else:
            raise KeyError(f"Unknown canvas attribute: {attr}")

    def _apply_pen(self) -> None:
        if self.is_text:
            return
        if self._stroke_width <= 0:
            self.graphic.setPen(pg.mkPen(None))
        else:
            self.graphic.setPen(pg.mkPen(self._stroke_color, width=self._stroke_width))

    @property
    def translation(self) -> tuple[float, float]:
        return self._translate

    def set_translate(self, dx: float, dy: float) -> None:
        self._translate = (float(dx), float(dy))
        self._apply_transform()

    def _apply_transform(self) -> None:
        center = self.graphic.boundingRect().center()
        transform = QTransform()
        transform.translate(self._translate[0], self._translate[1])
        if self._scale != 1.0:
            transform.translate(center.x(), center.y())
            transform.scale(self._scale, self._scale)
            transform.translate(-center.x(), -center.y())
        self.graphic.setTransform(transform)

    def rendered_width(self) -> float:
        return self.graphic.boundingRect().width()

    def rendered_height(self) -> float:
        return self.graphic.boundingRect().height()

    # Animation
    # ---------

    def animate(self, attrs: dict[str, float], duration_ms: float, delay_ms: float = 0) -> None:
        group = QSequentialAnimationGroup(self.surface.view)
        if delay_ms > 0:
            group.addAnimation(QPauseAnimation(int(delay_ms)))

        together = QParallelAnimationGroup()
        for attr, target in attrs.items():
            if attr not in ANIMATABLE:
                raise KeyError(f"Attribute cannot be animated: {attr}")
            animation = QVariantAnimation()
            animation.setDuration(max(int(duration_ms), 0))
            animation.setStartValue(float(self.get(attr)))
            animation.setEndValue(float(target))
            animation.valueChanged.connect(lambda value, a=attr: self.set(a, value))
            animation.stateChanged.connect(self._restart_from_current(animation, attr))
            together.addAnimation(animation)
        group.addAnimation(together)

        group.finished.connect(lambda g=group: self._forget_animation(g))
        self._animations.append(group)
        group.start()

    def _restart_from_current(self, animation: QVariantAnimation, attr: str) -> Callable:
        # A delayed animation starts from the value at the end of the delay
        def on_state_changed(new_state, old_state):
            if new_state == QAbstractAnimation.State.Running:
                animation.setStartValue(float(self.get(attr)))
        return on_state_changed

    def _forget_animation(self, group: QSequentialAnimationGroup) -> None:
        if group in self._animations:
            self._animations.remove(group)
        group.deleteLater()

    def stop_animations(self) -> None:
        for group in self._animations:
            group.stop()
            group.deleteLater()
        self._animations.clear()

    def is_animating(self) -> bool:
        return bool(self._animations)

    # Ordering and lifetime
    # ---------------------

    def remove(self) -> None:
        self.stop_animations()
        scene = self.graphic.scene()
        if scene is not None:
            scene.removeItem(self.graphic)

    def bring_to_front(self) -> None:
        self.graphic.setZValue(self.surface.next_z())

    # Events
    # ------

    def on_drag(self, on_move, on_start, on_end) -> None:
        self.drag_callbacks = (on_move, on_start, on_end)

    def on_context_menu(self, callback) -> None:
        self.context_menu_callback = callback

    def on_wheel(self, callback) -> None:
        self.wheel_callback = callback

    def set_pointer_passthrough(self, enabled: bool) -> None:
        if enabled:
            self.graphic.setAcceptedMouseButtons(Qt.MouseButton.NoButton)
        else:
            self.graphic.setAcceptedMouseButtons(Qt.MouseButton.AllButtons)
        self.graphic.setAcceptHoverEvents(not enabled)


class _CanvasView(pg.GraphicsView):
    """GraphicsView that reports its size changes."""

    # Class default: GraphicsView.__init__ already calls resizeEvent
    resized_callback: Callable[[int, int], None] | None = None

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent, background=config.get_color("background", "#aaaaaa"))
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)

    def resizeEvent(self, ev):
        super().resizeEvent(ev)
        if self.resized_callback is not None:
            self.resized_callback(self.width(), self.height())


class QtCanvasSurface(CanvasSurface):
    """Canvas surface drawn in a pyqtgraph GraphicsView (one scene unit = one pixel).

    Attributes:
        view: The widget to put in a layout
    """

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        try:
            pg.setConfigOptions(antialias=True)
        except Exception as e:
            logger.warning("Could not set PyQtGraph config options: %s", e)

        self.view = _CanvasView(parent)
        self._z = 0.0
        self._font = QFont(config.get_font("primary"))
        self._font.setPointSize(int(config.fonts.get("labelSize", 9)))

    def on_resized(self, callback: Callable[[int, int], None]) -> None:
        """Call `callback(width, height)` whenever the view changes size."""
        self.view.resized_callback = callback

    def next_z(self) -> float:
        self._z += 1
        return self._z

    @property
    def width(self) -> float:
        return float(self.view.width())

    @property
    def height(self) -> float:
        return float(self.view.height())

    def create_rect(self, x: float, y: float, w: float, h: float, radius: float = 0) -> QtCanvasItem:
        item = QtCanvasItem(self)
        graphic = _RectGraphic(item, radius)
        graphic.setRect(QRectF(0, 0, w, h))
        graphic.setPos(x, y)
        graphic.setPen(pg.mkPen(None))
        item.graphic = graphic
        return self._add(item)

    def create_text(self, x: float, y: float, text: str) -> QtCanvasItem:
        item = QtCanvasItem(self)
        graphic = _TextGraphic(item, text)
        graphic.setFont(self._font)
        graphic.setPos(x, y)
        item.graphic = graphic
        return self._add(item)

    def _add(self, item: QtCanvasItem) -> QtCanvasItem:
        item.graphic.setZValue(self.next_z())
        self.view.scene().addItem(item.graphic)
        return item

    def items(self) -> list[QtCanvasItem]:
        graphics = [g for g in self.view.scene().items() if isinstance(g, _PointerForwarding)]
        graphics.sort(key=lambda g: g.zValue())
        return [g.owner for g in graphics]

    def resize(self, width: float, height: float) -> None:
        if (int(width), int(height)) != (self.view.width(), self.view.height()):
            self.view.resize(int(width), int(height))

    def clear(self) -> None:
        for item in self.items():
            item.remove()
