"""
User-facing error reporting.

Everything passed to `ErrorNotifier.notify` is logged. What the user sees
depends on the severity:

- ``error`` / ``critical``: modal QMessageBox, traceback in the details
- ``warning``: QErrorMessage, which offers "do not show again"
- anything else: a status bar message on the active main window
"""
from __future__ import annotations

import logging
import time
import traceback
from typing import Optional

from PySide6.QtCore import QObject, Qt, QTimer
from PySide6.QtWidgets import QApplication, QErrorMessage, QMainWindow, QMessageBox

from clippy.app.app_settings_manager import AppSettingsManager
from clippy.utils.json_loader import truthy_env

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warning": logging.WARNING,
}
STATUS_MESSAGE_MS = 5000


class ErrorNotifier(QObject):
    """Process-wide notifier; use `ErrorNotifier.instance()`."""

    _instance: Optional[ErrorNotifier] = None

    def __init__(self):
        super().__init__()
        self.dev_mode = truthy_env("CLIPPY_DEV")
        self._recent: dict[tuple[str, str, str], float] = {}
        self._warning_dialog: QErrorMessage | None = None

    @classmethod
    def instance(cls) -> ErrorNotifier:
        if cls._instance is None:
            cls._instance = ErrorNotifier()
        return cls._instance

    @classmethod
    def configure(cls, settings: AppSettingsManager) -> ErrorNotifier:
        notifier = cls.instance()
        notifier.dev_mode = notifier.dev_mode or settings.dev_mode
        return notifier

    def notify(self, title: str, msg: str, *,
               detail: Optional[str] = None,
               exc_info: Optional[tuple] = None,
               severity: str = "error",
               dedup_seconds: float = 2.0) -> None:
        """
        Log the message and show it once the event loop is idle.

        The same (severity, title, msg) shown again within `dedup_seconds`
        is logged but not displayed.
        """
        has_exc = bool(exc_info) and exc_info[0] is not None
        logger.log(_LOG_LEVELS.get(severity, logging.INFO), "%s: %s", title, msg,
                   exc_info=exc_info if has_exc else None)

        key = (severity, title, msg)
        now = time.monotonic()
        if now - self._recent.get(key, float("-inf")) < dedup_seconds:
            return
        self._recent[key] = now

        if has_exc and not detail:
            detail = "".join(traceback.format_exception(*exc_info))

        if severity in ("error", "critical"):
            QTimer.singleShot(0, lambda: self._show_box(title, msg, detail, severity))
        elif severity == "warning":
            QTimer.singleShot(0, lambda: self._show_warning(f"{title}: {msg}"))
        else:
            QTimer.singleShot(0, lambda: self._show_status(f"{title}: {msg}"))

    def _show_box(self, title: str, msg: str, detail: Optional[str], severity: str) -> None:
        box = QMessageBox(QMessageBox.Critical if severity == "critical" else QMessageBox.Warning,
                          title, msg)
        if detail:
            box.setDetailedText(detail)
            if self.dev_mode:
                box.setTextInteractionFlags(Qt.TextSelectableByMouse)
        box.exec()

    def _show_warning(self, text: str) -> None:
        if self._warning_dialog is None:
            self._warning_dialog = QErrorMessage()
        self._warning_dialog.showMessage(text)

    def _show_status(self, text: str) -> None:
        window = QApplication.activeWindow()
        if isinstance(window, QMainWindow):
            window.statusBar().showMessage(text, STATUS_MESSAGE_MS)
