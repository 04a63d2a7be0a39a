"""
Persistent application settings.

Every setting is a QSettings key ``<section>/<name>`` with an in-code default
and a validator. A stored value the validator rejects (hand-edited INI file,
older version) falls back to the default instead of failing startup.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable

from PySide6.QtCore import QSettings

logger = logging.getLogger(__name__)

ORG_DOMAIN = "clippy.org"
APP_NAME = "Clippy"

LOGGING_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
HANDLE_RADIUS_RANGE = (2, 40)


class RunMode(str, Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    VERBOSE = "verbose"

    def __str__(self):
        return self.value


DEFAULTS: dict[str, dict[str, Any]] = {
    "general": {
        "run_mode": RunMode.PRODUCTION.value,
        "logging_level": "INFO",
    },
    "clip": {
        "handle_radius": 10,
        "overlay_opacity": 0.45,
        "strict_transitions": False,
    },
}


def _run_mode(v: Any) -> RunMode:
    return RunMode(str(v).strip().lower())


def _logging_level(v: Any) -> str:
    level = str(v).strip().upper()
    if level not in LOGGING_LEVELS:
        raise ValueError(level)
    return level


def _handle_radius(v: Any) -> int:
    radius = int(float(v))
    low, high = HANDLE_RADIUS_RANGE
    if not low <= radius <= high:
        raise ValueError(radius)
    return radius


def _opacity(v: Any) -> float:
    opacity = float(v)
    if not 0.0 <= opacity <= 1.0:
        raise ValueError(opacity)
    return opacity


def _flag(v: Any) -> bool:
    # INI files hand booleans back as "true"/"false"
    if isinstance(v, bool):
        return v
    return str(v).strip().lower() in ("1", "true", "yes", "on")


_VALIDATORS: dict[str, Callable[[Any], Any]] = {
    "general/run_mode": _run_mode,
    "general/logging_level": _logging_level,
    "clip/handle_radius": _handle_radius,
    "clip/overlay_opacity": _opacity,
    "clip/strict_transitions": _flag,
}


def _default(key: str) -> Any:
    section, name = key.split("/")
    return _VALIDATORS[key](DEFAULTS[section][name])


class AppSettingsManager:
    """
    Typed access to the ``general`` and ``clip`` settings.

    Values are validated once when loaded. Setters validate, store the value
    in QSettings right away and update the in-memory copy.
    """

    def __init__(self, org_domain: str = ORG_DOMAIN, app_name: str = APP_NAME):
        self._settings = QSettings(org_domain, app_name)
        self._values: dict[str, Any] = {}
        self._load()

    @property
    def run_mode(self) -> RunMode:
        return self._values["general/run_mode"]

    @property
    def dev_mode(self) -> bool:
        return self.run_mode is RunMode.DEVELOPMENT

    @property
    def logging_level(self) -> str:
        return self._values["general/logging_level"]

    @property
    def handle_radius(self) -> int:
        return self._values["clip/handle_radius"]

    @property
    def overlay_opacity(self) -> float:
        return self._values["clip/overlay_opacity"]

    @property
    def strict_transitions(self) -> bool:
        return self._values["clip/strict_transitions"]

    def set_run_mode(self, v: str | RunMode) -> None:
        self._store("general/run_mode", v)

    def set_logging_level(self, v: str) -> None:
        self._store("general/logging_level", v)

    def set_handle_radius(self, v: int) -> None:
        self._store("clip/handle_radius", v)

    def set_overlay_opacity(self, v: float) -> None:
        self._store("clip/overlay_opacity", v)

    def set_strict_transitions(self, v: bool) -> None:
        self._store("clip/strict_transitions", v)

    def reset_all_to_default(self) -> None:
        """Forget every stored setting. Shortcuts live in their own group."""
        for section in DEFAULTS:
            self._settings.remove(section)
        self._load()

    def reset_section(self, section: str) -> None:
        if section not in DEFAULTS:
            raise ValueError(f"Invalid section: {section}")
        self._settings.remove(section)
        self._load()

    def to_dict(self) -> dict[str, dict[str, Any]]:
        out: dict[str, dict[str, Any]] = {section: {} for section in DEFAULTS}
        for key, value in self._values.items():
            section, name = key.split("/")
            out[section][name] = value.value if isinstance(value, Enum) else value
        return out

    def _validated(self, key: str, raw: Any) -> Any:
        try:
            return _VALIDATORS[key](raw)
        except (TypeError, ValueError):
            logger.warning("Invalid value %r for %s, using the default", raw, key)
            return _default(key)

    def _load(self) -> None:
        for key in _VALIDATORS:
            raw = self._settings.value(key, None)
            self._values[key] = _default(key) if raw is None else self._validated(key, raw)

    def _store(self, key: str, raw: Any) -> None:
        value = self._validated(key, raw)
        self._settings.setValue(key, value.value if isinstance(value, Enum) else value)
        self._values[key] = value
