from __future__ import annotations

import logging
import sys
from pathlib import Path

from PySide6.QtCore import QSettings
from PySide6.QtGui import QAction
from PySide6.QtWidgets import (
    QApplication,
    QFileDialog,
    QInputDialog,
    QMainWindow,
    QMessageBox,
    QScrollArea,
)

from app.fluidgrid.layout.errors import InvalidArgument
from app.fluidgrid.layout.justified import ORPHAN_POLICIES
from app.fluidgrid.layout.settings import GridSettings
from app.fluidgrid.utils.media_scan import scan_image_paths
from native.fluidgrid_app.grid_widget import JustifiedGridWidget

logger = logging.getLogger(__name__)

_SETTING_KEYS = {
    "row_height_px": "grid/row_height",
    "gutter_px": "grid/gutter",
    "orphan_policy": "grid/orphan_policy",
}


def load_grid_settings(qsettings: QSettings) -> GridSettings:
    """Read grid settings, falling back to defaults on bad stored values."""

    values = {name: qsettings.value(key, None) for name, key in _SETTING_KEYS.items()}
    try:
        return GridSettings.from_mapping(values)
    except InvalidArgument as exc:
        logger.warning("Ignoring stored grid settings: %s", exc)
        return GridSettings()


def save_grid_settings(qsettings: QSettings, settings: GridSettings) -> None:
    for name, key in _SETTING_KEYS.items():
        qsettings.setValue(key, getattr(settings, name))


class GalleryWindow(QMainWindow):
    def __init__(self, qsettings: QSettings | None = None) -> None:
        super().__init__()
        self.setWindowTitle("FluidGrid")
        self.resize(1200, 800)

        self.qsettings = qsettings or QSettings("FluidGrid", "FluidGrid")
        self.grid = JustifiedGridWidget(load_grid_settings(self.qsettings))
        self.grid.layoutUpdated.connect(self._on_layout_updated)

        scroll = QScrollArea(self)
        scroll.setWidgetResizable(True)
        scroll.setWidget(self.grid)
        self.setCentralWidget(scroll)

        self._build_menu()

        last = str(self.qsettings.value("gallery/last_folder", "", type=str) or "")
        if last and Path(last).is_dir():
            self.load_folder(last)

    def _build_menu(self) -> None:
        file_menu = self.menuBar().addMenu("&File")
        open_action = QAction("Open Folder…", self)
        open_action.triggered.connect(self.choose_folder)
        file_menu.addAction(open_action)
        file_menu.addSeparator()
        quit_action = QAction("Exit", self)
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

        grid_menu = self.menuBar().addMenu("&Grid")
        row_height_action = QAction("Row Height…", self)
        row_height_action.triggered.connect(self.choose_row_height)
        grid_menu.addAction(row_height_action)
        gutter_action = QAction("Gutter…", self)
        gutter_action.triggered.connect(self.choose_gutter)
        grid_menu.addAction(gutter_action)
        orphan_action = QAction("Last Row Height…", self)
        orphan_action.triggered.connect(self.choose_orphan_policy)
        grid_menu.addAction(orphan_action)

        help_menu = self.menuBar().addMenu("&Help")
        about_action = QAction("About", self)
        about_action.triggered.connect(self.about)
        help_menu.addAction(about_action)

    def load_folder(self, folder: str) -> None:
        paths = scan_image_paths(folder)
        logger.info("Loading %d images from %s", len(paths), folder)
        self.grid.load_paths(paths)
        self.qsettings.setValue("gallery/last_folder", folder)
        self.setWindowTitle(f"FluidGrid - {Path(folder).name}")

    def choose_folder(self) -> None:
        folder = QFileDialog.getExistingDirectory(self, "Choose image folder")
        if folder:
            self.load_folder(folder)

    def _apply_settings(self, **changes) -> None:
        current = self.grid.settings
        values = {name: getattr(current, name) for name in _SETTING_KEYS}
        values.update(changes)
        try:
            settings = GridSettings.from_mapping(values)
        except InvalidArgument as exc:
            QMessageBox.warning(self, "FluidGrid", str(exc))
            return
        save_grid_settings(self.qsettings, settings)
        self.grid.set_settings(settings)

    def choose_row_height(self) -> None:
        value, ok = QInputDialog.getInt(
            self, "Row Height", "Nominal row height (px):", self.grid.settings.row_height_px, 1, 4000
        )
        if ok:
            self._apply_settings(row_height_px=value)

    def choose_gutter(self) -> None:
        value, ok = QInputDialog.getInt(self, "Gutter", "Gutter per item (px):", self.grid.settings.gutter_px, 0, 200)
        if ok:
            self._apply_settings(gutter_px=value)

    def choose_orphan_policy(self) -> None:
        names = sorted(ORPHAN_POLICIES)
        current = names.index(self.grid.settings.orphan_policy)
        name, ok = QInputDialog.getItem(self, "Last Row Height", "Short last row uses:", names, current, False)
        if ok:
            self._apply_settings(orphan_policy=name)

    def _on_layout_updated(self, row_count: int) -> None:
        self.statusBar().showMessage(f"{len(self.grid.items())} items in {row_count} rows")

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self.grid.detach()
        super().closeEvent(event)

    def about(self) -> None:
        s = self.grid.settings
        info = (
            "FluidGrid\n\n"
            "Justified image grid (PySide6)\n\n"
            f"• Row height: {s.row_height_px}px\n"
            f"• Gutter: {s.gutter_px}px\n"
            f"• Last row: {s.orphan_policy}"
        )
        QMessageBox.information(self, "About FluidGrid", info)


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    app = QApplication(sys.argv)
    app.setOrganizationName("FluidGrid")
    app.setApplicationName("FluidGrid")

    win = GalleryWindow()
    win.show()
    if len(sys.argv) > 1 and Path(sys.argv[1]).is_dir():
        win.load_folder(sys.argv[1])
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
