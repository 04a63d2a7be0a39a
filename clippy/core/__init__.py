"""Core components layer - Qt-independent clip region logic."""

from clippy.core.clip_region import ClipRegionController
from clippy.core.errors import ClippyError, InvalidStructureError, InvalidTransitionError
from clippy.core.geometry import (
    Rectangle,
    Vertex,
    map_to_vertex,
    polygon_area,
)
from clippy.core.handle_set import HandleSet, append, create_session
from clippy.core.path_builder import build_path, css_declaration
from clippy.core.states.clip_lifecycle import ClipLifecycle, ClipState

__all__ = [
    "ClipLifecycle",
    "ClipRegionController",
    "ClipState",
    "ClippyError",
    "HandleSet",
    "InvalidStructureError",
    "InvalidTransitionError",
    "Rectangle",
    "Vertex",
    "append",
    "build_path",
    "create_session",
    "css_declaration",
    "map_to_vertex",
    "polygon_area",
]
