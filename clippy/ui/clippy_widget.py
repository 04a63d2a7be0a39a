"""
Host widget wrapping one child with a clip-path editor.
"""
from __future__ import annotations

import logging
from typing import Sequence

from PySide6.QtCore import QEvent, QObject, QPointF, Qt, Signal
from PySide6.QtGui import QColor, QGuiApplication, QPainter, QPen, QPolygonF
from PySide6.QtWidgets import QLabel, QPushButton, QVBoxLayout, QWidget

from clippy.core.clip_region import ClipRegionController
from clippy.core.errors import InvalidStructureError
from clippy.core.geometry import BoundsProvider
from clippy.core.handle_set import HandleSet
from clippy.core.path_builder import parse_path, polygon_value
from clippy.core.states.clip_lifecycle import ClipState
from clippy.ui.bounds import WidgetBounds

logger = logging.getLogger(__name__)

OVERLAY_COLOR = QColor(255, 214, 10)
HANDLE_COLOR = QColor(20, 20, 20)


class ClipOverlay(QWidget):
    """
    Transparent layer laid exactly over the wrapped child.

    Paints the live polygon and, while clipping, the handle markers.
    Mouse clicks are only accepted while clipping; otherwise the overlay is
    transparent for mouse events and the child receives them.
    """

    def __init__(self, host: ClippyWidget, parent: QWidget,
                 handle_radius: int = 10, opacity: float = 0.45) -> None:
        super().__init__(parent)
        self._host = host
        self.handle_radius = handle_radius
        self.opacity = opacity
        self._path = ""
        self._clipping = False
        self.setAttribute(Qt.WA_TransparentForMouseEvents, True)
        self.setAttribute(Qt.WA_NoSystemBackground, True)
        self.setCursor(Qt.CrossCursor)

    @property
    def path(self) -> str:
        return self._path

    def set_path(self, path: str) -> None:
        self._path = path
        self.update()

    def set_clipping(self, clipping: bool) -> None:
        self._clipping = clipping
        self.setAttribute(Qt.WA_TransparentForMouseEvents, not clipping)
        self.update()

    def handle_points(self) -> list[QPointF]:
        """Marker centres, one per handle; the closing pair is not a handle."""
        return [QPointF(fx * self.width(), fy * self.height())
                for fx, fy in (v.fractions for v in self._host.controller.handles.vertices())]

    def mousePressEvent(self, event) -> None:
        if not self._clipping or event.button() != Qt.LeftButton:
            super().mousePressEvent(event)
            return
        local = event.position()
        window_pos = local if self.isWindow() else self.mapTo(self.window(), local)
        self._host.add_point(window_pos.x(), window_pos.y())
        event.accept()

    def paintEvent(self, event) -> None:
        points = [QPointF(fx * self.width(), fy * self.height())
                  for fx, fy in parse_path(self._path)]
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, True)

        if len(points) >= 3:
            fill = QColor(OVERLAY_COLOR)
            fill.setAlphaF(self.opacity)
            painter.setPen(Qt.NoPen)
            painter.setBrush(fill)
            painter.drawPolygon(QPolygonF(points))

        if self._clipping:
            if len(points) >= 2:
                painter.setPen(QPen(OVERLAY_COLOR, 2.0))
                painter.setBrush(Qt.NoBrush)
                painter.drawPolyline(QPolygonF(points))
            painter.setPen(QPen(HANDLE_COLOR, 1.0))
            painter.setBrush(OVERLAY_COLOR)
            r = self.handle_radius
            for point in self.handle_points():
                painter.drawEllipse(point, r, r)
        painter.end()


class ClippyWidget(QWidget):
    """
    Wrap exactly one widget and let the user clip it with a polygon.

    Layout, top to bottom:
    - the child with the ClipOverlay stacked on top of it
    - a toggle button cycling idle -> clipping -> complete -> idle
    - a readout with the finalised `clip-path: polygon(...);` declaration

    Signals:
        clipCompleted(str): finalised path, once per completed session.
        stateChanged(str): new lifecycle state value.
        handlesChanged(int): number of handles after every change.
    """

    clipCompleted = Signal(str)
    stateChanged = Signal(str)
    handlesChanged = Signal(int)

    def __init__(
            self,
            child: QWidget | Sequence[QWidget],
            parent: QWidget | None = None,
            *,
            handle_radius: int = 10,
            overlay_opacity: float = 0.45,
            strict_transitions: bool = False,
            bounds_provider: BoundsProvider | None = None,
    ) -> None:
        super().__init__(parent)
        self._child: QWidget | None = None
        self._bounds_provider: BoundsProvider = bounds_provider or WidgetBounds()

        self.controller = ClipRegionController(strict_transitions=strict_transitions)
        self.controller.add_handles_changed_callback(self._on_handles_changed)
        self.controller.add_completion_callback(self._on_clip_completed)
        self.controller.lifecycle.add_state_changed_callback(self._on_state_changed)

        self.stage = QWidget(self)
        self._stage_layout = QVBoxLayout(self.stage)
        self._stage_layout.setContentsMargins(0, 0, 0, 0)

        self.overlay = ClipOverlay(self, self.stage, handle_radius, overlay_opacity)

        self.toggle_button = QPushButton(self.controller.button_label(), self)
        self.toggle_button.setObjectName("clippy-action-button")
        self.toggle_button.clicked.connect(self.toggle)

        self.readout = QLabel("", self)
        self.readout.setObjectName("clippy-readout")
        self.readout.setTextInteractionFlags(Qt.TextSelectableByMouse)

        layout = QVBoxLayout(self)
        layout.addWidget(self.stage)
        layout.addWidget(self.toggle_button)
        layout.addWidget(self.readout)

        self.set_child(child)
        self.overlay.set_path(self.controller.live_path)

    # ----------------------------------------------------
    # public API
    @property
    def child(self) -> QWidget | None:
        return self._child

    def set_child(self, child: QWidget | Sequence[QWidget]) -> None:
        """
        Wrap `child`. Only a single widget can ever be wrapped.

        :raises InvalidStructureError: for anything but exactly one QWidget,
            or when a child is already wrapped.
        """
        if self._child is not None:
            raise InvalidStructureError("ClippyWidget already wraps a widget.")
        if isinstance(child, (list, tuple)):
            if len(child) != 1:
                raise InvalidStructureError(
                    f"ClippyWidget wraps exactly one widget, got {len(child)}.")
            child = child[0]
        if not isinstance(child, QWidget):
            raise InvalidStructureError(
                f"ClippyWidget can only wrap a QWidget, got {type(child).__name__}.")

        self._child = child
        self._stage_layout.addWidget(child)
        child.installEventFilter(self)
        self.overlay.raise_()
        logger.debug("wrapping %s", type(child).__name__)

    def toggle(self) -> ClipState:
        self.remeasure()
        return self.controller.toggle()

    def add_point(self, x: float, y: float) -> None:
        """Forward a click in window coordinates to the controller."""
        self.remeasure()
        self.controller.add_point(x, y)

    def remeasure(self) -> None:
        """Measure the child again and keep the overlay on top of it."""
        if self._child is None:
            return
        self.controller.set_bounds(self._bounds_provider.measure(self._child))
        self.overlay.setGeometry(self._child.geometry())
        self.overlay.raise_()

    def overlay_polygon_value(self) -> str:
        return polygon_value(self.overlay.path)

    def copy_clip_path(self) -> bool:
        """Copy the finalised declaration to the clipboard."""
        if not self.controller.finalized_path:
            return False
        QGuiApplication.clipboard().setText(self.controller.readout())
        return True

    # ----------------------------------------------------
    # Qt events
    def eventFilter(self, obj: QObject, event: QEvent) -> bool:
        if obj is self._child and event.type() in (QEvent.Resize, QEvent.Move, QEvent.Show):
            self.remeasure()
        return super().eventFilter(obj, event)

    def showEvent(self, event) -> None:
        super().showEvent(event)
        self.remeasure()

    def moveEvent(self, event) -> None:
        super().moveEvent(event)
        self.remeasure()

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        self.remeasure()

    # -------------------------------------------------
    # controller callbacks
    def _on_handles_changed(self, handles: HandleSet) -> None:
        self.overlay.set_path(self.controller.live_path)
        self.handlesChanged.emit(len(handles))

    def _on_clip_completed(self, path: str) -> None:
        self.readout.setText(self.controller.readout())
        self.clipCompleted.emit(path)

    def _on_state_changed(self, old: ClipState, new: ClipState) -> None:
        self.toggle_button.setText(self.controller.button_label())
        self.overlay.set_clipping(new is ClipState.CLIPPING)
        if new is ClipState.IDLE:
            self.readout.setText("")
        self.stateChanged.emit(new.value)
