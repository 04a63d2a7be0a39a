"""Bounds provider for Qt widgets."""
from __future__ import annotations

from PySide6.QtCore import QPoint
from PySide6.QtWidgets import QWidget

from clippy.core.geometry import Rectangle


def measure(widget: QWidget | None) -> Rectangle:
    """
    Return the widget rectangle in its top-level window's coordinates.

    A widget that is missing or not shown yet has no on-screen box, so the
    empty rectangle is returned instead.
    """
    if widget is None or not widget.isVisible():
        return Rectangle.empty()
    window = widget.window()
    origin = QPoint(0, 0) if widget is window else widget.mapTo(window, QPoint(0, 0))
    return Rectangle.from_origin_size(origin.x(), origin.y(), widget.width(), widget.height())


class WidgetBounds:
    """`BoundsProvider` measuring QWidgets with `measure`."""

    def measure(self, element: QWidget | None) -> Rectangle:
        return measure(element)
