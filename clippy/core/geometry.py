"""Rectangle / vertex model and the pointer-to-vertex mapping."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Protocol, Sequence

import numpy as np


@dataclass(frozen=True)
class Rectangle:
    """
    Screen rectangle of the wrapped element.

    Coordinates are pixels relative to the host top-level window.
    An all-zero rectangle means "not yet measured".
    """
    left: float = 0.0
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @staticmethod
    def empty() -> Rectangle:
        """Return the unmeasured rectangle."""
        return Rectangle()

    @classmethod
    def from_origin_size(cls, left: float, top: float, width: float, height: float) -> Rectangle:
        return cls(
            left=float(left),
            top=float(top),
            right=float(left) + float(width),
            bottom=float(top) + float(height),
            width=float(width),
            height=float(height),
        )

    @property
    def is_measured(self) -> bool:
        return self.width > 0 and self.height > 0

    @property
    def css_width(self) -> str:
        """Width as a CSS-ready number string, empty when unmeasured."""
        return _format_length(self.width)

    @property
    def css_height(self) -> str:
        """Height as a CSS-ready number string, empty when unmeasured."""
        return _format_length(self.height)

    def __str__(self) -> str:
        return f"{self.width:g} x {self.height:g} @ ({self.left:g}, {self.top:g})"


class BoundsProvider(Protocol):
    """Measures where an element currently sits on screen."""

    def measure(self, element: Any) -> Rectangle: ...


@dataclass(frozen=True)
class Vertex:
    """One clip-path corner as a pair of percentage strings."""
    x: str
    y: str

    @staticmethod
    def from_fractions(fx: float, fy: float) -> Vertex:
        return Vertex(format_percent(fx), format_percent(fy))

    @property
    def fractions(self) -> tuple[float, float]:
        """Return the (x, y) position as 0..1 fractions."""
        return _parse_percent(self.x), _parse_percent(self.y)

    def css(self) -> str:
        return f"{self.x} {self.y}"

    def __str__(self) -> str:
        return self.css()


SEED_VERTEX = Vertex("0.00%", "0.00%")


def _format_length(value: float) -> str:
    if value <= 0:
        return ""
    return f"{value:g}"


def _parse_percent(text: str) -> float:
    return float(text.rstrip("%")) / 100.0


def format_percent(fraction: float) -> str:
    """Format a 0..1 fraction as a percentage with two decimals."""
    return f"{fraction * 100.0:.2f}%"


def clamp(value: float, lower: float = 0.0, upper: float = 1.0) -> float:
    """Clamp value into [lower, upper]; NaN clamps to lower."""
    if math.isnan(value):
        return lower
    return max(lower, min(upper, value))


def _normalize(offset: float, size: float) -> float:
    if size <= 0 or not math.isfinite(size):
        return 0.0
    return clamp(offset / size)


def map_to_vertex(pointer_x: float, pointer_y: float, rectangle: Rectangle) -> Vertex:
    """
    Convert a viewport pointer position into a vertex relative to the rectangle.

    The rectangle origin is subtracted before dividing by its size, so the
    vertex is relative to the element rather than the window. Points outside
    the rectangle are clamped onto its border, and an unmeasured rectangle
    yields (0%, 0%).

    :param pointer_x: Pointer x in window pixels.
    :param pointer_y: Pointer y in window pixels.
    :param rectangle: Current bounds of the wrapped element.
    :return: Vertex with both coordinates in [0%, 100%].
    """
    nx = _normalize(pointer_x - rectangle.left, rectangle.width)
    ny = _normalize(pointer_y - rectangle.top, rectangle.height)
    return Vertex.from_fractions(nx, ny)


def polygon_area(points: Sequence[tuple[float, float]]) -> float:
    """
    Calculate the absolute area of a simple polygon (shoelace formula).

    :param points: Polygon corners in order; the ring is closed implicitly.
    :return: Area in the units of the input, 0.0 for fewer than 3 points.
    """
    if len(points) < 3:
        return 0.0
    pts = np.asarray(points, dtype=float)
    x = pts[:, 0]
    y = pts[:, 1]
    return float(0.5 * abs(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1))))
