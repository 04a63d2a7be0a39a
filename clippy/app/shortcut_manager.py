"""
Keyboard shortcuts of the main window.

Default bindings ship in ``settings/shortcuts.json`` as ``{"command": "Key"}``.
A binding changed by the user is kept in QSettings under ``shortcuts/<command>``
and wins over the file. Every command becomes a QAction on the parent widget;
MainWindow attaches the handler with `add_callback`.
"""
import logging
import sys
from pathlib import Path
from typing import Callable, Optional

from PySide6.QtCore import QSettings
from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import QWidget

from clippy.app.app_settings_manager import APP_NAME, ORG_DOMAIN, AppSettingsManager
from clippy.ui.dialogs.error_notifier import ErrorNotifier
from clippy.utils.json_loader import read_json_dict

logger = logging.getLogger(__name__)

SETTINGS_GROUP = "shortcuts"
SHORTCUTS_FILE = "shortcuts.json"


def _action_text(command: str) -> str:
    return command.replace("_", " ").title()


class ShortcutManager:
    """Bind the commands of `shortcuts.json` to QActions on `parent`."""

    def __init__(self, parent: QWidget, config_path: Path,
                 settings_manager: Optional[AppSettingsManager] = None):
        self.parent = parent
        self.config_path = Path(config_path)
        self._settings_manager = settings_manager or AppSettingsManager()
        self._store = QSettings(ORG_DOMAIN, APP_NAME)

        self._defaults = self._read_defaults()
        self._callbacks: dict[str, Callable[[], object]] = {}
        self._actions: dict[str, QAction] = {
            command: self._make_action(command) for command in self._defaults
        }
        logger.debug("%d shortcuts bound (run mode %s)",
                     len(self._actions), self._settings_manager.run_mode)

    def _read_defaults(self) -> dict[str, str]:
        data = read_json_dict(self.config_path / SHORTCUTS_FILE,
                              strict=self._settings_manager.dev_mode, logger=logger)
        return {str(command): str(seq) for command, seq in (data or {}).items()}

    def _make_action(self, command: str) -> QAction:
        action = QAction(_action_text(command), self.parent)
        action.setShortcut(QKeySequence(self.binding(command)))
        action.triggered.connect(lambda checked=False, c=command: self._run_command(c))
        self.parent.addAction(action)
        return action

    def binding(self, command: str) -> str:
        """Key sequence of `command`: the user's override, else the file default."""
        return self._store.value(f"{SETTINGS_GROUP}/{command}", "") or self._defaults[command]

    def _run_command(self, command: str) -> None:
        callback = self._callbacks.get(command)
        if callback is None:
            ErrorNotifier.instance().notify(
                title="Unregistered Shortcut",
                msg=f"Command '{command}' is not registered.",
                severity="error",
                dedup_seconds=1.0,
            )
            return

        logger.info("Shortcut triggered: %s -> %s", command,
                    getattr(callback, "__qualname__", repr(callback)))
        try:
            callback()
        except Exception:
            ErrorNotifier.instance().notify(
                title="Shortcut Error",
                msg=f"'{_action_text(command)}' failed.",
                exc_info=sys.exc_info(),
                severity="error",
                dedup_seconds=1.0,
            )
            if self._settings_manager.dev_mode:
                raise

    def add_callback(self, command: str, callback: Callable[[], object]) -> None:
        if command not in self._actions:
            raise KeyError(f"No shortcut named '{command}' in {SHORTCUTS_FILE}.")
        self._callbacks[command] = callback

    def update_shortcut(self, command: str, sequence: str) -> bool:
        """
        Rebind `command` and remember it in QSettings.

        Returns False for unknown commands, empty sequences and sequences
        already used by another action.
        """
        action = self._actions.get(command)
        wanted = QKeySequence(sequence)
        if action is None or wanted.isEmpty():
            return False
        if any(other.shortcut() == wanted for other in self._actions.values()):
            logger.info("Shortcut %s already in use, %s keeps %s",
                        wanted.toString(), command, action.shortcut().toString())
            return False
        action.setShortcut(wanted)
        self._store.setValue(f"{SETTINGS_GROUP}/{command}", wanted.toString())
        return True

    def reset_to_default(self) -> None:
        self._store.remove(SETTINGS_GROUP)
        for command, action in self._actions.items():
            action.setShortcut(QKeySequence(self._defaults[command]))

    def actions(self) -> list[QAction]:
        return list(self._actions.values())
