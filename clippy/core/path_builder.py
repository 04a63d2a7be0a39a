"""Polygon path string derivation."""
from __future__ import annotations

from clippy.core.handle_set import HandleSet

CLOSING_THRESHOLD = 3


def build_path(handles: HandleSet) -> str:
    """
    Build the comma separated `"x% y%"` list for a CSS polygon.

    Once 3 or more vertices exist the first vertex (key 1, the session seed)
    is repeated at the end to close the outline back to the origin corner.
    """
    pairs = [vertex.css() for _, vertex in handles]
    if len(pairs) >= CLOSING_THRESHOLD and handles.first is not None:
        pairs.append(handles.first.css())
    return ",".join(pairs)


def polygon_value(path: str) -> str:
    return f"polygon({path})"


def css_declaration(path: str) -> str:
    """Render the `clip-path` declaration shown to the user."""
    return f"clip-path: {polygon_value(path)};"


def parse_path(path: str) -> list[tuple[float, float]]:
    """
    Turn a path string back into (x, y) fractions in 0..1.

    Used by the overlay to paint exactly the string it would hand to CSS.
    """
    points: list[tuple[float, float]] = []
    for pair in filter(None, (p.strip() for p in path.split(","))):
        x, y = pair.split()
        points.append((float(x.rstrip("%")) / 100.0, float(y.rstrip("%")) / 100.0))
    return points
