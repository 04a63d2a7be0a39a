from __future__ import annotations

import logging
from typing import Callable

from clippy.core import geometry
from clippy.core.geometry import Rectangle, Vertex
from clippy.core.handle_set import HandleSet, create_session
from clippy.core.path_builder import build_path, css_declaration
from clippy.core.states.clip_lifecycle import ClipLifecycle, ClipState

logger = logging.getLogger(__name__)


HandlesChangedCallback = Callable[[HandleSet], None]
CompletionCallback = Callable[[str], None]

BUTTON_LABELS: dict[ClipState, str] = {
    ClipState.IDLE: "Begin clipping",
    ClipState.CLIPPING: "Stop clipping",
    ClipState.COMPLETE: "Restart clipping",
}


class ClipRegionController:
    """
    Owns one clip session: bounds, lifecycle and the handle set.

    - collects clicks (window coordinates) while clipping
    - keeps the live polygon path in sync with the handles
    - emits the finalised path exactly once when the session completes

    The controller is Qt-independent; the host widget feeds it bounds and
    pointer positions and listens to its callbacks.
    """

    def __init__(self, bounds: Rectangle | None = None, *, strict_transitions: bool = False) -> None:
        self._bounds = bounds or Rectangle.empty()
        self._handles: HandleSet = create_session()
        self._finalized_path = ""
        self.strict_transitions = strict_transitions

        self._on_handles_changed: list[HandlesChangedCallback] = []
        self._on_completed: list[CompletionCallback] = []

        self.lifecycle = ClipLifecycle()
        self.lifecycle.add_enter_callback(ClipState.CLIPPING, self._on_enter_clipping)
        self.lifecycle.add_enter_callback(ClipState.COMPLETE, self._on_enter_complete)
        self.lifecycle.add_enter_callback(ClipState.IDLE, self._on_enter_idle)

    # ----------------------------------------------------
    # public API
    @property
    def bounds(self) -> Rectangle:
        return self._bounds

    def set_bounds(self, bounds: Rectangle) -> None:
        if bounds != self._bounds:
            logger.debug("bounds updated: %s", bounds)
        self._bounds = bounds

    @property
    def state(self) -> ClipState:
        return self.lifecycle.state

    @property
    def handles(self) -> HandleSet:
        return self._handles

    @property
    def live_path(self) -> str:
        return build_path(self._handles)

    @property
    def finalized_path(self) -> str:
        return self._finalized_path

    def add_handles_changed_callback(self, callback: HandlesChangedCallback) -> None:
        self._on_handles_changed.append(callback)

    def add_completion_callback(self, callback: CompletionCallback) -> None:
        """Callback signature: callback(path: str) -> None"""
        self._on_completed.append(callback)

    def toggle(self) -> ClipState:
        """Advance the cycle one step (what the toggle button does)."""
        return self.lifecycle.advance()

    def begin(self) -> bool:
        return self.lifecycle.request(ClipState.CLIPPING, strict=self.strict_transitions)

    def complete(self) -> bool:
        return self.lifecycle.request(ClipState.COMPLETE, strict=self.strict_transitions)

    def reset(self) -> bool:
        return self.lifecycle.request(ClipState.IDLE, strict=self.strict_transitions)

    def add_point(self, x: float, y: float) -> Vertex | None:
        """
        Register a new vertex from a pointer position (window pixels).

        :return: The appended vertex, or None when not clipping.
        """
        if self.state is not ClipState.CLIPPING:
            logger.debug("ignoring point (%s, %s) in state %s", x, y, self.state)
            return None
        vertex = geometry.map_to_vertex(x, y, self._bounds)
        self._replace_handles(self._handles.append(vertex))
        logger.debug("handle %d added at %s", self._handles.max_key, vertex)
        return vertex

    def button_label(self) -> str:
        return BUTTON_LABELS[self.state]

    def readout(self) -> str:
        return css_declaration(self._finalized_path)

    def clipped_area_ratio(self) -> float:
        """Area of the live polygon as a fraction of the wrapped element."""
        return geometry.polygon_area([v.fractions for v in self._handles.vertices()])

    # -------------------------------------------------
    # Internal helpers
    def _replace_handles(self, handles: HandleSet) -> None:
        self._handles = handles
        _notify_each(self._on_handles_changed, handles, "handles changed")

    def _on_enter_clipping(self) -> None:
        self._replace_handles(create_session())

    def _on_enter_complete(self) -> None:
        self._finalized_path = build_path(self._handles)
        logger.info("clip complete with %d handles: %s", len(self._handles), self._finalized_path)
        _notify_each(self._on_completed, self._finalized_path, "completion")

    def _on_enter_idle(self) -> None:
        self._finalized_path = ""
        self._replace_handles(create_session())


def _notify_each(callbacks: list[Callable], value, kind: str) -> None:
    """Call every listener with `value`; one failing listener does not starve the rest."""
    for callback in callbacks:
        try:
            callback(value)
        except Exception:
            logger.exception("Error in %s callback", kind)
