"""Where the files bundled with the clippy package live at run time."""
import sys
from pathlib import Path

PACKAGE_DIR = Path(__file__).resolve().parents[1]


def settings_dir() -> Path:
    """
    Directory holding shortcuts.json.

    A PyInstaller build unpacks package data below ``sys._MEIPASS``.
    """
    bundle = getattr(sys, "_MEIPASS", None)
    if bundle:
        return Path(bundle) / "clippy" / "settings"
    return PACKAGE_DIR / "settings"
