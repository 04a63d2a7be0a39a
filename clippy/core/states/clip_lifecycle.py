"""Three-phase clip lifecycle: idle -> clipping -> complete -> idle."""
from __future__ import annotations

import logging
from enum import Enum
from typing import Callable

from clippy.core.errors import InvalidTransitionError

logger = logging.getLogger(__name__)


class ClipState(str, Enum):
    IDLE = "idle"
    CLIPPING = "clipping"
    COMPLETE = "complete"

    def __str__(self):
        return self.value


# The only allowed transition out of each state.
TRANSITIONS: dict[ClipState, ClipState] = {
    ClipState.IDLE: ClipState.CLIPPING,
    ClipState.CLIPPING: ClipState.COMPLETE,
    ClipState.COMPLETE: ClipState.IDLE,
}


class ClipLifecycle:
    """
    Single-direction state machine driving a clip session.

    - The cycle only advances idle -> clipping -> complete -> idle.
    - The state value changes before any callback runs, so an enter callback
      for COMPLETE always observes the machine already in COMPLETE.
    - Enter callbacks fire exactly once per transition into their state.

    Usage:
        lifecycle = ClipLifecycle()
        lifecycle.add_enter_callback(ClipState.COMPLETE, on_complete)
        lifecycle.advance()
    """

    def __init__(self, initial: ClipState = ClipState.IDLE) -> None:
        self._state = ClipState(initial)
        self._on_enter_callbacks: dict[ClipState, list[Callable[[], None]]] = {}
        self._on_exit_callbacks: dict[ClipState, list[Callable[[], None]]] = {}
        self._on_changed_callbacks: list[Callable[[ClipState, ClipState], None]] = []

    @property
    def state(self) -> ClipState:
        return self._state

    def next_state(self) -> ClipState:
        """Return the state `advance()` would move to."""
        return TRANSITIONS[self._state]

    def can_transition(self, target: ClipState) -> bool:
        return TRANSITIONS[self._state] == ClipState(target)

    def advance(self) -> ClipState:
        """Perform the single allowed transition and return the new state."""
        self._transition(self.next_state())
        return self._state

    def request(self, target: ClipState | str, *, strict: bool = False) -> bool:
        """
        Request a transition to `target`.

        :param target: Requested state.
        :param strict: Raise InvalidTransitionError instead of ignoring
                       a transition outside the cycle.
        :return: True if the transition happened, False if it was ignored.
        """
        target = ClipState(target)
        if not self.can_transition(target):
            if strict:
                raise InvalidTransitionError(self._state, target)
            logger.warning("Ignoring clip transition %s -> %s", self._state, target)
            return False
        self._transition(target)
        return True

    def add_enter_callback(self, state: ClipState, callback: Callable[[], None]) -> None:
        self._on_enter_callbacks.setdefault(ClipState(state), []).append(callback)

    def add_exit_callback(self, state: ClipState, callback: Callable[[], None]) -> None:
        self._on_exit_callbacks.setdefault(ClipState(state), []).append(callback)

    def add_state_changed_callback(
            self,
            callback: Callable[[ClipState, ClipState], None]
    ) -> None:
        """
        Add a callback for any state change.

        Callback signature: callback(old_state: ClipState, new_state: ClipState) -> None
        """
        self._on_changed_callbacks.append(callback)

    def _transition(self, target: ClipState) -> None:
        old_state = self._state
        self._state = target
        logger.info("Clip state changed %s -> %s", old_state, target)

        self._run_callbacks(self._on_exit_callbacks.get(old_state, []), "exit")
        self._run_callbacks(self._on_enter_callbacks.get(target, []), "enter")
        for callback in self._on_changed_callbacks:
            try:
                callback(old_state, target)
            except Exception:
                logger.exception("Error in clip state changed callback")

    @staticmethod
    def _run_callbacks(callbacks: list[Callable[[], None]], kind: str) -> None:
        for callback in callbacks:
            try:
                callback()
            except Exception:
                logger.exception("Error in clip state %s callback", kind)
