# weld_annote/widgets/meta_panel.py
from __future__ import annotations

from typing import List, Optional

from PyQt5.QtCore import pyqtSignal
from PyQt5.QtWidgets import (
    QComboBox,
    QFormLayout,
    QGroupBox,
    QLineEdit,
    QWidget,
)

from ..domain import DEFAULT_WELD_TYPES, MetaRecord, normalize_weld_type


class MetaPanel(QGroupBox):
    """
    Title + weld type for the current video. Changes are only written to
    meta.json together with the next saved annotation.
    """
    meta_changed = pyqtSignal(object)  # MetaRecord

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__("Video Info", parent)

        self._weld_types: List[str] = list(DEFAULT_WELD_TYPES)
        self._updating = False

        layout = QFormLayout(self)
        layout.setContentsMargins(6, 6, 6, 6)

        self.title_edit = QLineEdit()
        self.title_edit.setPlaceholderText("Annotation title")
        self.title_edit.textChanged.connect(self._emit_changed)

        self.weld_combo = QComboBox()
        self.weld_combo.addItems(self._weld_types)
        self.weld_combo.currentTextChanged.connect(self._emit_changed)

        layout.addRow("Title:", self.title_edit)
        layout.addRow("Weld type:", self.weld_combo)

    def set_weld_types(self, weld_types: List[str]) -> None:
        current = self.weld_combo.currentText()
        self._weld_types = list(weld_types or DEFAULT_WELD_TYPES)
        self._updating = True
        try:
            self.weld_combo.clear()
            self.weld_combo.addItems(self._weld_types)
            if current in self._weld_types:
                self.weld_combo.setCurrentText(current)
        finally:
            self._updating = False

    def set_meta(self, meta: MetaRecord) -> None:
        self._updating = True
        try:
            self.title_edit.setText(meta.title or "")
            self.weld_combo.setCurrentText(normalize_weld_type(meta.weld_type, self._weld_types))
        finally:
            self._updating = False

    def meta(self) -> MetaRecord:
        return MetaRecord(title=self.title_edit.text(), weld_type=self.weld_combo.currentText())

    def _emit_changed(self, *_args) -> None:
        if self._updating:
            return
        self.meta_changed.emit(self.meta())
