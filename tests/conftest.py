import os

# Must be set before the QApplication is created by pytest-qt.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from pathlib import Path

import pytest
from PySide6.QtCore import QSettings

from clippy.app.app_settings_manager import APP_NAME, ORG_DOMAIN
from clippy.core.geometry import Rectangle


@pytest.fixture
def tmp_settings(tmp_path: Path):
    """Switch QSettings to INI files in a temp folder so tests do not leak."""
    QSettings.setDefaultFormat(QSettings.IniFormat)
    QSettings.setPath(QSettings.IniFormat, QSettings.UserScope, str(tmp_path))
    s = QSettings(ORG_DOMAIN, APP_NAME)
    s.clear()
    yield s
    s.clear()


class StubNotifier:
    calls = []

    @classmethod
    def instance(cls):
        return cls

    @classmethod
    def notify(cls, **kwargs):
        cls.calls.append(kwargs)


@pytest.fixture
def stub_notifier():
    StubNotifier.calls.clear()
    yield StubNotifier
    StubNotifier.calls.clear()


@pytest.fixture
def rect_200x100() -> Rectangle:
    return Rectangle(left=0, top=0, right=200, bottom=100, width=200, height=100)
