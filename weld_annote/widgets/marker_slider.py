# weld_annote/widgets/marker_slider.py
from __future__ import annotations

from typing import List

from PyQt5.QtCore import Qt, QRect
from PyQt5.QtGui import QColor, QPainter, QPen
from PyQt5.QtWidgets import QSlider, QStyle, QStyleOptionSlider


MARKER_COLOR = "#FFB000"


class MarkerSlider(QSlider):
    """
    Scrub slider (values in ms) that draws a tick for every stored annotation.

    Safety:
      - Disables click-to-jump (only allow dragging by handle)
      - Ignores mouse wheel (prevents accidental timeline changes)
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self._markers: List[int] = []

        self.setMouseTracking(True)
        self._cursor_on_handle = False

    # -------------
    # Marker API
    # -------------

    def set_markers(self, timestamps_ms: List[int]) -> None:
        self._markers = sorted(int(t) for t in (timestamps_ms or []))
        self.update()

    # -------------
    # Interaction safety
    # -------------

    def _click_is_on_handle(self, pos) -> bool:
        opt = QStyleOptionSlider()
        self.initStyleOption(opt)
        handle = self.style().subControlRect(QStyle.CC_Slider, opt, QStyle.SC_SliderHandle, self)
        return handle.contains(pos)

    def _update_hover_cursor(self, pos) -> None:
        on_handle = self._click_is_on_handle(pos)
        if on_handle and not self._cursor_on_handle:
            self._cursor_on_handle = True
            self.setCursor(Qt.PointingHandCursor)
        elif (not on_handle) and self._cursor_on_handle:
            self._cursor_on_handle = False
            self.unsetCursor()

    def mousePressEvent(self, event):
        if event.button() == Qt.LeftButton and not self._click_is_on_handle(event.pos()):
            self._update_hover_cursor(event.pos())
            event.ignore()
            return
        super().mousePressEvent(event)

    def wheelEvent(self, event):
        event.ignore()

    def mouseMoveEvent(self, event):
        self._update_hover_cursor(event.pos())
        return super().mouseMoveEvent(event)

    def leaveEvent(self, event):
        if self._cursor_on_handle:
            self._cursor_on_handle = False
            self.unsetCursor()
        return super().leaveEvent(event)

    # -------------
    # Painting
    # -------------

    def _value_to_pixel(self, value: int, groove: QRect) -> int:
        """Map a slider value to an x pixel position within the groove."""
        if self.maximum() <= self.minimum():
            return groove.x()
        v = max(self.minimum(), min(int(value), self.maximum()))
        span = max(1, groove.width())
        return groove.x() + QStyle.sliderPositionFromValue(self.minimum(), self.maximum(), v, span)

    def paintEvent(self, event):
        super().paintEvent(event)

        if not self._markers or self.maximum() <= self.minimum():
            return

        opt = QStyleOptionSlider()
        self.initStyleOption(opt)
        groove = self.style().subControlRect(QStyle.CC_Slider, opt, QStyle.SC_SliderGroove, self)
        if groove.isNull():
            return

        painter = QPainter(self)
        painter.setPen(QPen(QColor(MARKER_COLOR), 2))
        h = max(8, groove.height() + 6)
        top = groove.center().y() - h // 2
        for ts in self._markers:
            if ts > self.maximum():
                continue
            x = self._value_to_pixel(ts, groove)
            painter.drawLine(x, top, x, top + h)
        painter.end()
