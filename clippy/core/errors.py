"""Exceptions raised by the clip-region core."""
from __future__ import annotations


class ClippyError(Exception):
    """Base class for clippy errors."""


class InvalidTransitionError(ClippyError):
    """Raised when a lifecycle transition outside the clip cycle is requested strictly."""

    def __init__(self, current, requested) -> None:
        super().__init__(f"Cannot transition from {current} to {requested}.")
        self.current = current
        self.requested = requested


class InvalidStructureError(ClippyError):
    """Raised when the host is asked to wrap anything other than exactly one widget."""
