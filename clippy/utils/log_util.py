"""Logging helpers used by the UI layer."""
import functools
import inspect
import logging
import time
from typing import Any, Callable

logger = logging.getLogger("clippy.calls")

_LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _short_repr(value: Any, limit: int = 120) -> str:
    try:
        text = repr(value)
    except Exception:
        text = f"<{type(value).__name__}>"
    return text if len(text) <= limit else text[:limit] + "..."


def log_io(level: int = logging.DEBUG, mask: tuple[str, ...] = ()):
    """
    Log each call of the decorated function with its arguments, result and
    duration. Arguments named in `mask` are written as ``***``.
    """
    def decorator(func: Callable):
        name = func.__qualname__
        signature = inspect.signature(func)

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            if logger.isEnabledFor(level):
                bound = signature.bind_partial(*args, **kwargs).arguments
                shown = ", ".join(
                    f"{k}={'***' if k in mask else _short_repr(v)}"
                    for k, v in bound.items() if k not in ("self", "cls")
                )
                logger.log(level, "call %s(%s)", name, shown)

            started = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception:
                logger.exception("%s raised", name)
                raise
            logger.log(level, "done %s in %.1f ms -> %s",
                       name, (time.perf_counter() - started) * 1000.0, _short_repr(result))
            return result
        return wrapper
    return decorator


def level_from_name(value: Any, default: int = logging.INFO) -> int:
    """Turn ``"warning"``, ``"30"`` or ``30`` into a logging level; anything else gives `default`."""
    if isinstance(value, int):
        return value
    text = str(value or "").strip().upper()
    if text.isdigit():
        return int(text)
    return getattr(logging, text) if text in _LEVEL_NAMES else default
