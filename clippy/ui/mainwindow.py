import copy
import logging
from pathlib import Path

from PySide6 import QtCore
from PySide6.QtGui import QPixmap
from PySide6.QtWidgets import QFileDialog, QLabel, QMainWindow

from clippy.app.app_settings_manager import AppSettingsManager
from clippy.app.shortcut_manager import ShortcutManager
from clippy.app.status import STATUS_FIELDS, StatusField
from clippy.ui.clippy_widget import ClippyWidget
from clippy.ui.dialogs.error_notifier import ErrorNotifier
from clippy.utils.log_util import log_io
from clippy.utils.resource_paths import settings_dir

logger = logging.getLogger(__name__)

IMAGE_FILTER = "Images (*.png *.jpg *.jpeg *.bmp *.gif *.webp)"
PLACEHOLDER_SIZE = QtCore.QSize(480, 320)


class MainWindow(QMainWindow):
    """Main window: one clippable image, shortcuts and a status bar."""

    def __init__(self, settings_mgr: AppSettingsManager | None = None,
                 image_path: str | Path | None = None, config_path: Path | None = None):
        """
        Initialize the main window.

        :param settings_mgr: Application settings manager.
        :param image_path: Optional image to wrap on startup.
        :param config_path: Directory holding shortcuts.json.
        """
        super().__init__()

        self.setting = settings_mgr or AppSettingsManager()

        self.shortcut_mgr = ShortcutManager(
            parent=self,
            config_path=config_path or settings_dir(),
            settings_manager=self.setting,
        )

        # Per-instance copies so several windows do not share values.
        self.status_fields: dict[str, StatusField] = {
            k: copy.deepcopy(v) for k, v in STATUS_FIELDS.items()
        }
        self._status_label: dict[str, QLabel] = {}

        self.setWindowTitle("Clippy - polygon clip-path builder")
        self._setup_ui()
        self._setup_menus()
        self._setup_status_bar()
        self._register_shortcuts()

        if image_path:
            self.load_image(image_path)

    def _setup_ui(self) -> None:
        self.target = QLabel("Open an image to clip (Ctrl+O)")
        self.target.setAlignment(QtCore.Qt.AlignCenter)
        self.target.setFixedSize(PLACEHOLDER_SIZE)
        self.target.setStyleSheet("background: #3a6ea5; color: white;")

        self.clippy = ClippyWidget(
            self.target,
            handle_radius=self.setting.handle_radius,
            overlay_opacity=self.setting.overlay_opacity,
            strict_transitions=self.setting.strict_transitions,
        )
        self.setCentralWidget(self.clippy)

        self.clippy.stateChanged.connect(self._on_state_changed)
        self.clippy.handlesChanged.connect(self._on_handles_changed)
        self.clippy.clipCompleted.connect(self._on_clip_completed)

    def _setup_menus(self) -> None:
        menubar = self.menuBar()

        file_menu = menubar.addMenu("&File")
        file_menu.addAction("&Open image...", self.open_image)
        file_menu.addSeparator()
        file_menu.addAction("&Quit", self.close)

        edit_menu = menubar.addMenu("&Edit")
        edit_menu.addAction("&Toggle clipping", self.clippy.toggle)
        edit_menu.addAction("&Copy clip-path", self.copy_clip_path)

    def _setup_status_bar(self) -> None:
        for key, field in self.status_fields.items():
            if field.visible:
                self._status_label[key] = QLabel(field.text(), self)
                self.statusBar().addPermanentWidget(self._status_label[key])

    def _register_shortcuts(self) -> None:
        self.shortcut_mgr.add_callback("toggle_clipping", self.clippy.toggle)
        self.shortcut_mgr.add_callback("copy_clip_path", self.copy_clip_path)
        self.shortcut_mgr.add_callback("open_image", self.open_image)
        self.shortcut_mgr.add_callback("quit", self.close)

    # =====================================================
    # Actions
    # =====================================================

    @log_io(level=logging.INFO)
    def open_image(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Open image", "", IMAGE_FILTER)
        if not path:
            return
        self.load_image(path)

    @log_io(level=logging.INFO)
    def load_image(self, path: str | Path) -> bool:
        """Show the image in the wrapped label. Returns False if it cannot be read."""
        pixmap = QPixmap(str(path))
        if pixmap.isNull():
            ErrorNotifier.instance().notify(
                title="Open Image",
                msg=f"Cannot load image: {path}",
                severity="error",
            )
            return False
        self.target.setText("")
        self.target.setStyleSheet("")
        self.target.setFixedSize(pixmap.size())
        self.target.setPixmap(pixmap)
        self.clippy.remeasure()
        self._update_status("size", (float(pixmap.width()), float(pixmap.height())))
        return True

    def copy_clip_path(self) -> None:
        if self.clippy.copy_clip_path():
            self.statusBar().showMessage("clip-path copied to clipboard", 3000)
        else:
            self.statusBar().showMessage("Complete a clip first", 3000)

    # =====================================================
    # Signal Handlers
    # =====================================================

    def _on_state_changed(self, state: str) -> None:
        self._update_status("state", state)
        bounds = self.clippy.controller.bounds
        self._update_status("size", (bounds.width, bounds.height))

    def _on_handles_changed(self, count: int) -> None:
        self._update_status("handles", count)
        self._update_status("area", self.clippy.controller.clipped_area_ratio() * 100.0)

    def _on_clip_completed(self, path: str) -> None:
        logger.info("clip-path ready: polygon(%s)", path)

    def _update_status(self, key: str, value) -> None:
        field = self.status_fields[key]
        field.value = value
        if key in self._status_label:
            self._status_label[key].setText(field.text())
