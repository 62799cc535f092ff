# weld_annote/widgets/annotation_list.py
from __future__ import annotations

from typing import List, Optional

from PyQt5.QtCore import Qt, pyqtSignal, QEvent
from PyQt5.QtWidgets import (
    QGroupBox,
    QListWidget,
    QListWidgetItem,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from ..domain import StoreEntry
from ..timeutils import timestamp_label


class AnnotationList(QGroupBox):
    """
    Picklist of stored annotations, one row per timestamp ("1.50s").

    Emits:
      - entry_selected(str)    record name picked by the user
      - delete_requested(str)  record name, after the user confirmed
    """
    entry_selected = pyqtSignal(str)
    delete_requested = pyqtSignal(str)

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__("Annotations", parent)

        self._entries: List[StoreEntry] = []

        self._build_ui()
        self._apply_clickable_cursors()

    # ---------------- UI ----------------

    def _build_ui(self):
        layout = QVBoxLayout()
        layout.setContentsMargins(6, 6, 6, 6)
        layout.setSpacing(6)
        self.setLayout(layout)

        self.list = QListWidget()
        self.list.currentItemChanged.connect(self._on_selection_changed)
        layout.addWidget(self.list, stretch=1)

        self.btn_delete = QPushButton("Delete Selected")
        self.btn_delete.clicked.connect(self._on_delete_selected)
        layout.addWidget(self.btn_delete)

    # ---------------- Public API ----------------

    def set_entries(self, entries: List[StoreEntry]) -> None:
        self._entries = list(entries or [])
        self.refresh()

    def selected_name(self) -> Optional[str]:
        item = self.list.currentItem()
        if not item:
            return None
        return item.data(Qt.UserRole)

    def refresh(self) -> None:
        self.list.blockSignals(True)
        try:
            self.list.clear()
            for entry in self._entries:
                item = QListWidgetItem(timestamp_label(entry.timestamp))
                item.setData(Qt.UserRole, entry.name)
                self.list.addItem(item)
            self.list.setCurrentRow(-1)
        finally:
            self.list.blockSignals(False)

    # ---------------- Internals ----------------

    def _on_selection_changed(self, current: QListWidgetItem, previous: QListWidgetItem):
        if current is None:
            return
        name = current.data(Qt.UserRole)
        if name:
            self.entry_selected.emit(str(name))

    def _on_delete_selected(self):
        name = self.selected_name()
        if not name:
            return
        resp = QMessageBox.question(
            self,
            "Delete annotation?",
            "Are you sure you want to delete this annotation?",
            QMessageBox.Yes | QMessageBox.No,
            QMessageBox.No,
        )
        if resp != QMessageBox.Yes:
            return
        self.delete_requested.emit(name)

    def _apply_clickable_cursors(self) -> None:
        self.btn_delete.setCursor(Qt.PointingHandCursor)

        # List rows are clickable/selectable; use a hand cursor over the viewport.
        self.list.setMouseTracking(True)
        self.list.viewport().setMouseTracking(True)
        self.list.viewport().installEventFilter(self)

    def eventFilter(self, obj, event):
        # Cursor feedback for list viewport
        if hasattr(self, "list") and obj is self.list.viewport():
            et = event.type()
            if et == QEvent.MouseMove:
                it = self.list.itemAt(event.pos())
                self.list.viewport().setCursor(Qt.PointingHandCursor if it is not None else Qt.ArrowCursor)
            elif et in (QEvent.Leave, QEvent.HoverLeave):
                self.list.viewport().setCursor(Qt.ArrowCursor)
        return super().eventFilter(obj, event)
