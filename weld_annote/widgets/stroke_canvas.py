# weld_annote/widgets/stroke_canvas.py
from __future__ import annotations

from typing import Callable, Iterable, Optional

from PyQt5.QtCore import Qt, QRect, QPointF
from PyQt5.QtGui import QColor, QPainter, QPainterPath, QPen
from PyQt5.QtWidgets import QWidget

from ..domain import DEFAULT_PEN_COLOR, Point, Stroke


STROKE_WIDTH = 3


def render_strokes(painter: QPainter, strokes: Iterable[Stroke], clear_rect: Optional[QRect] = None) -> None:
    """
    Draws each stroke as a polyline, in list order, so later strokes end up on top.

    If clear_rect is given it is wiped to transparent first (offscreen images).
    Widgets pass None because Qt already erases the area before paintEvent.
    """
    if clear_rect is not None:
        painter.save()
        painter.setCompositionMode(QPainter.CompositionMode_Source)
        painter.fillRect(clear_rect, Qt.transparent)
        painter.restore()

    painter.setRenderHint(QPainter.Antialiasing, True)
    painter.setBrush(Qt.NoBrush)

    for stroke in strokes:
        if not stroke.points:
            continue
        pen = QPen(QColor(stroke.color), STROKE_WIDTH)
        pen.setCapStyle(Qt.FlatCap)
        pen.setJoinStyle(Qt.MiterJoin)
        painter.setPen(pen)

        path = QPainterPath()
        first = stroke.points[0]
        path.moveTo(QPointF(first.x, first.y))
        for p in stroke.points[1:]:
            path.lineTo(QPointF(p.x, p.y))
        painter.drawPath(path)


class StrokeCanvas(QWidget):
    """
    Transparent ink layer placed over the video.

    Pointer gestures are forwarded to the session (begin/extend/end stroke);
    the session decides whether drawing is currently allowed. Painting always
    reflects the session's working set.
    """

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.setAttribute(Qt.WA_NoSystemBackground, True)
        self.setAttribute(Qt.WA_TranslucentBackground, True)
        self.setMouseTracking(False)

        self._session = None  # AnnotationSession
        self._color_provider: Callable[[], str] = lambda: DEFAULT_PEN_COLOR

    # ---------------- Public API ----------------

    def set_session(self, session) -> None:
        self._session = session
        self.update()

    def set_color_provider(self, fn: Callable[[], str]) -> None:
        self._color_provider = fn or (lambda: DEFAULT_PEN_COLOR)

    def set_accepts_input(self, accepts: bool) -> None:
        # While viewing, clicks fall through to the video underneath.
        self.setAttribute(Qt.WA_TransparentForMouseEvents, not accepts)
        self.setCursor(Qt.CrossCursor if accepts else Qt.ArrowCursor)

    def strokes(self):
        if self._session is None:
            return []
        return list(self._session.strokes)

    # ---------------- Pointer events ----------------

    def _point(self, event) -> Point:
        pos = event.localPos()
        return Point(x=float(pos.x()), y=float(pos.y()))

    def mousePressEvent(self, event):
        if self._session is None or event.button() != Qt.LeftButton:
            return super().mousePressEvent(event)
        self._session.begin_stroke(self._color_provider(), self._point(event))
        self.update()

    def mouseMoveEvent(self, event):
        if self._session is None or not self._session.is_drawing():
            return super().mouseMoveEvent(event)
        self._session.extend_stroke(self._point(event))
        self.update()

    def mouseReleaseEvent(self, event):
        if self._session is not None:
            self._session.end_stroke()
        super().mouseReleaseEvent(event)

    def leaveEvent(self, event):
        if self._session is not None:
            self._session.end_stroke()
        super().leaveEvent(event)

    # ---------------- Painting ----------------

    def paintEvent(self, event):
        painter = QPainter(self)
        try:
            render_strokes(painter, self.strokes())
        finally:
            painter.end()
