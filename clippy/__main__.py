import argparse
import logging
import sys

from PySide6 import QtWidgets

from clippy.app.app_settings_manager import AppSettingsManager
from clippy.app.logging_setup import (
    LogSystem,
    apply_logging_policy,
    install_crash_logging,
    install_qt_message_handler,
)
from clippy.ui.dialogs.error_notifier import ErrorNotifier
from clippy.ui.mainwindow import MainWindow

logger = logging.getLogger(__name__)

APP_NAME = "clippy"


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog=APP_NAME, description="Build a CSS polygon clip-path visually.")
    parser.add_argument("image", nargs="?", help="image file to clip")
    parser.add_argument("--log-level", help="initial log level (DEBUG, INFO, WARNING, ERROR)")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(sys.argv[1:] if argv is None else argv)

    # crash logging and the Qt message handler must be in place before QApplication
    install_crash_logging(APP_NAME)
    install_qt_message_handler()
    logs = LogSystem(APP_NAME, args.log_level)

    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication(sys.argv)
    settings_mgr = AppSettingsManager()
    apply_logging_policy(logs, settings_mgr)
    ErrorNotifier.configure(settings_mgr)
    logger.info("log file: %s (run mode %s)", logs.log_file, settings_mgr.run_mode)

    main_window = MainWindow(settings_mgr, image_path=args.image)
    main_window.show()

    app.aboutToQuit.connect(logs.stop)
    try:
        rc = app.exec()
        logger.info("App exit (rc=%s)", rc)
        sys.exit(rc)
    finally:
        logs.stop()


if __name__ == "__main__":
    main()
