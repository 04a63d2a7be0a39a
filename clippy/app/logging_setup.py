"""
Logging for the Clippy application.

`install_crash_logging` runs first in ``clippy.__main__``, before any
QApplication exists: it sends native crashes (faulthandler) to
``clippy.crash.log`` and uncaught Python exceptions to the log.

`LogSystem` then owns the session logging. Records go to the console
directly and to a rotating ``clippy.log`` through a QueueListener thread.
`apply_logging_policy` sets the levels from the run mode and the
``general/logging_level`` setting once settings are loaded.
"""
from __future__ import annotations

import faulthandler
import logging
import logging.config
import os
import queue
import sys
import tempfile
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from pathlib import Path

from PySide6.QtCore import QtMsgType, qInstallMessageHandler

from clippy import __version__
from clippy.app.app_settings_manager import AppSettingsManager, RunMode
from clippy.utils.log_util import level_from_name

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)-7s %(threadName)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_BYTES = 5 * 1024 * 1024

_QT_LEVELS = {
    QtMsgType.QtDebugMsg: logging.DEBUG,
    QtMsgType.QtInfoMsg: logging.INFO,
    QtMsgType.QtWarningMsg: logging.WARNING,
    QtMsgType.QtCriticalMsg: logging.ERROR,
    QtMsgType.QtFatalMsg: logging.CRITICAL,
}

# faulthandler writes to this stream until the process exits
_crash_stream = None


def log_dir_for(app_name: str) -> Path:
    """First writable of ``~/.<app>/logs``, ``./logs`` and the temp directory."""
    for candidate in (Path.home() / f".{app_name}" / "logs",
                      Path.cwd() / "logs",
                      Path(tempfile.gettempdir()) / app_name):
        try:
            candidate.mkdir(parents=True, exist_ok=True)
        except OSError:
            continue
        if os.access(candidate, os.W_OK):
            return candidate
    raise OSError(f"no writable log directory for {app_name}")


def _log_uncaught(exc_type, exc, tb) -> None:
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc, tb)
        return
    logging.getLogger("clippy").critical("Uncaught exception", exc_info=(exc_type, exc, tb))


def install_crash_logging(app_name: str, log_dir: Path | None = None) -> Path:
    """Enable faulthandler and the uncaught-exception hook. Returns the crash file."""
    global _crash_stream
    crash_file = (log_dir or log_dir_for(app_name)) / f"{app_name}.crash.log"
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT, datefmt=DATE_FORMAT)

    try:
        _crash_stream = open(crash_file, "w", encoding="utf-8")
        faulthandler.enable(file=_crash_stream)
    except OSError:
        logger.warning("Crash log unavailable: %s", crash_file)
    sys.excepthook = _log_uncaught

    logger.info("%s %s starting (python %s, frozen=%s)", app_name, __version__,
                sys.version.split()[0], getattr(sys, "frozen", False))
    logger.info("crash log: %s", crash_file)
    return crash_file


class LogSystem:
    """Session logging: console plus a rotating file fed from a queue."""

    def __init__(self, app_name: str, level: str | int | None = None, log_dir: Path | None = None):
        self.log_file = (log_dir or log_dir_for(app_name)) / f"{app_name}.log"
        root_level = level_from_name(level or os.getenv("CLIPPY_LOG_LEVEL"))
        records: queue.Queue = queue.Queue(-1)

        logging.config.dictConfig({
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"clippy": {"format": LOG_FORMAT, "datefmt": DATE_FORMAT}},
            "handlers": {
                "console": {"class": "logging.StreamHandler", "formatter": "clippy", "level": "INFO"},
                "queue": {"class": "logging.handlers.QueueHandler", "queue": records},
            },
            "root": {"level": root_level, "handlers": ["console", "queue"]},
        })
        root_handlers = logging.getLogger().handlers
        self._console_handler = next(h for h in root_handlers if type(h) is logging.StreamHandler)
        queue_handler = next(h for h in root_handlers if isinstance(h, QueueHandler))

        self._file_handler = RotatingFileHandler(
            self.log_file,
            maxBytes=LOG_FILE_BYTES,
            backupCount=int(os.getenv("CLIPPY_LOG_BACKUP_COUNT", "5")),
            encoding="utf-8",
        )
        self._file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        self.listener = QueueListener(queue_handler.queue, self._file_handler,
                                      respect_handler_level=True)
        self.listener.start()
        self._stopped = False

    @property
    def console_level(self) -> int:
        return self._console_handler.level

    @property
    def file_level(self) -> int:
        return self._file_handler.level

    def set_levels(self, console: int, file: int) -> None:
        """Set both handler levels; the root logger passes the lower of the two."""
        logging.getLogger().setLevel(min(console, file))
        self._console_handler.setLevel(console)
        self._file_handler.setLevel(file)

    def stop(self) -> None:
        """Flush queued records into the file. Safe to call twice."""
        if self._stopped:
            return
        self._stopped = True
        self.listener.stop()
        self._file_handler.close()


def apply_logging_policy(logs: LogSystem, settings: AppSettingsManager) -> None:
    """
    Development and verbose runs log everything everywhere. A production run
    shows ``general/logging_level`` on the console and keeps at least INFO in
    the file.
    """
    if settings.run_mode in (RunMode.DEVELOPMENT, RunMode.VERBOSE):
        logs.set_levels(console=logging.DEBUG, file=logging.DEBUG)
        return
    console = level_from_name(settings.logging_level)
    logs.set_levels(console=console, file=min(console, logging.INFO))


def install_qt_message_handler() -> None:
    """Route qDebug/qWarning output of Qt itself into the ``qt`` logger."""
    qt_logger = logging.getLogger("qt")

    def handler(msg_type, context, message):
        qt_logger.log(_QT_LEVELS.get(msg_type, logging.WARNING), message)

    qInstallMessageHandler(handler)
