"""Reading the JSON files shipped under ``clippy/settings``."""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

_logger = logging.getLogger(__name__)


class SettingsError(RuntimeError):
    """A settings file is unusable and strict loading was asked for."""


def truthy_env(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes", "on")


def read_json_dict(path: Path, *, strict: bool,
                   logger: logging.Logger | None = None) -> dict[str, Any] | None:
    """
    Return the JSON object stored in `path`.

    A missing or unreadable file, broken JSON, or a top level that is not an
    object raises SettingsError when `strict` (development mode). Otherwise the
    problem is logged as a warning and None is returned so the caller can fall
    back to built-in defaults.
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        problem, cause = f"Settings file not found: {path}", e
    except (OSError, ValueError) as e:
        problem, cause = f"Cannot read settings file {path}: {e}", e
    else:
        if isinstance(data, dict):
            return data
        problem, cause = f"{path} must hold a JSON object, not {type(data).__name__}", None

    if strict:
        raise SettingsError(problem) from cause
    (logger or _logger).warning(problem)
    return None
