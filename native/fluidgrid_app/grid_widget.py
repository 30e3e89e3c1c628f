from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable

from PySide6.QtCore import Qt, QTimer, Signal
from PySide6.QtGui import QPixmap, QResizeEvent
from PySide6.QtWidgets import QLabel, QWidget

from app.fluidgrid.layout.errors import InvalidArgument
from app.fluidgrid.layout.items import AspectItem, build_items, renormalize
from app.fluidgrid.layout.justified import Row, layout_justified
from app.fluidgrid.layout.settings import GridSettings
from app.fluidgrid.utils.media_scan import collect_records

logger = logging.getLogger(__name__)


class JustifiedGridWidget(QWidget):
    """Lays out one QLabel per item in justified rows.

    Resizes are coalesced: however many resize events arrive in one pass of
    the event loop, the layout is recomputed once.
    """

    layoutUpdated = Signal(int)  # row count

    def __init__(self, settings: GridSettings | None = None, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._settings = settings or GridSettings()
        self._items: list[AspectItem] = []
        self._labels: list[QLabel] = []
        self._rows: list[Row] = []

        self._update_timer = QTimer(self)
        self._update_timer.setSingleShot(True)
        self._update_timer.setInterval(0)
        self._update_timer.timeout.connect(self.update_layout)

    @property
    def settings(self) -> GridSettings:
        return self._settings

    def set_settings(self, settings: GridSettings) -> None:
        old_row_height = self._settings.row_height_px
        self._settings = settings
        if settings.row_height_px != old_row_height:
            # Normalized widths depend on the nominal row height.
            self._items = renormalize(self._items, settings.row_height_px)
        self.schedule_update()

    def items(self) -> list[AspectItem]:
        return list(self._items)

    def rows(self) -> list[Row]:
        return list(self._rows)

    def item_label(self, index: int) -> QLabel:
        return self._labels[index]

    def set_records(self, records: Iterable[Any]) -> None:
        """Replace the grid contents with raw {key, width, height} records."""

        self._clear_labels()
        self._items = build_items(
            records,
            row_height_px=self._settings.row_height_px,
            width_key=self._settings.width_key,
            height_key=self._settings.height_key,
        )
        for item in self._items:
            label = QLabel(self)
            label.setScaledContents(True)
            label.setAlignment(Qt.AlignmentFlag.AlignCenter)
            if item.key and Path(item.key).is_file():
                label.setPixmap(QPixmap(item.key))
                label.setToolTip(Path(item.key).name)
            label.show()
            self._labels.append(label)
        self.update_layout()

    def load_paths(self, paths: Iterable[str | Path]) -> None:
        self.set_records(collect_records(paths))

    def is_update_pending(self) -> bool:
        return self._update_timer.isActive()

    def schedule_update(self) -> None:
        if not self._update_timer.isActive():
            self._update_timer.start()

    def update_layout(self) -> None:
        self._update_timer.stop()

        width = self.width()
        if not self._items or width <= 0:
            self._show_empty()
            return

        try:
            rows, placements, total = layout_justified(
                self._items,
                container_width_px=width,
                row_height_px=self._settings.row_height_px,
                gutter_px=self._settings.gutter_px,
                orphan_height=self._settings.orphan_height,
                width_fudge_px=self._settings.width_fudge_px,
            )
        except InvalidArgument as exc:
            logger.warning("Cannot lay out %d items at width %dpx: %s", len(self._items), width, exc)
            self._show_empty()
            return

        for p in placements:
            label = self._labels[p.index]
            label.setGeometry(p.x, p.y, p.width, p.height)
            label.show()

        self._rows = rows
        self.setMinimumHeight(total)
        self.layoutUpdated.emit(len(rows))

    def _show_empty(self) -> None:
        for label in self._labels:
            label.hide()
        self._rows = []
        self.setMinimumHeight(0)
        self.layoutUpdated.emit(0)

    def detach(self) -> None:
        """Cancel pending work and drop all items."""

        self._update_timer.stop()
        self._clear_labels()
        self._items = []
        self._rows = []

    def _clear_labels(self) -> None:
        for label in self._labels:
            label.hide()
            label.deleteLater()
        self._labels = []

    def resizeEvent(self, event: QResizeEvent) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        # Height changes come from our own setMinimumHeight; only width matters.
        if event.size().width() != event.oldSize().width():
            self.schedule_update()
