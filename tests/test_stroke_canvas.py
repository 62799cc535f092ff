import pytest
from PyQt5.QtCore import QEvent, QPointF, QRect, Qt
from PyQt5.QtGui import QImage, QMouseEvent, QPainter

from weld_annote.domain import Point, Stroke, VideoSelection
from weld_annote.session import AnnotationSession
from weld_annote.widgets.stroke_canvas import StrokeCanvas, render_strokes


RED = Stroke("#ff0000", [Point(0, 50), Point(100, 50)])
BLUE = Stroke("#0000ff", [Point(50, 0), Point(50, 100)])


def render(strokes, size=100):
    img = QImage(size, size, QImage.Format_ARGB32)
    img.fill(Qt.white)
    painter = QPainter(img)
    try:
        render_strokes(painter, strokes, clear_rect=QRect(0, 0, size, size))
    finally:
        painter.end()
    return img


def test_later_stroke_is_drawn_on_top(qapp):
    assert render([RED, BLUE]).pixelColor(50, 50).name() == "#0000ff"
    assert render([BLUE, RED]).pixelColor(50, 50).name() == "#ff0000"


def test_each_stroke_keeps_its_color(qapp):
    img = render([RED, BLUE])
    assert img.pixelColor(10, 50).name() == "#ff0000"
    assert img.pixelColor(50, 10).name() == "#0000ff"


def test_render_clears_previous_content(qapp):
    img = render([])
    assert img.pixelColor(50, 50).alpha() == 0


def test_single_point_and_empty_strokes_do_not_fail(qapp):
    img = render([Stroke("#ff0000", []), Stroke("#ff0000", [Point(20, 20)])])
    assert img.pixelColor(80, 80).alpha() == 0


def _mouse(kind, x, y, button=Qt.LeftButton):
    buttons = Qt.NoButton if kind == QEvent.MouseButtonRelease else Qt.LeftButton
    return QMouseEvent(kind, QPointF(x, y), button, buttons, Qt.NoModifier)


@pytest.fixture
def canvas_session(qapp, video_path):
    session = AnnotationSession.open(VideoSelection.from_path(str(video_path)))
    canvas = StrokeCanvas()
    canvas.resize(200, 200)
    canvas.set_session(session)
    canvas.set_color_provider(lambda: "#00ff00")
    return canvas, session


def test_canvas_drag_builds_stroke(canvas_session):
    canvas, session = canvas_session
    session.enter_annotating()

    canvas.mousePressEvent(_mouse(QEvent.MouseButtonPress, 10, 10))
    canvas.mouseMoveEvent(_mouse(QEvent.MouseMove, 20, 15))
    canvas.mouseReleaseEvent(_mouse(QEvent.MouseButtonRelease, 20, 15))
    canvas.mouseMoveEvent(_mouse(QEvent.MouseMove, 30, 30))

    assert canvas.strokes() == [Stroke("#00ff00", [Point(10, 10), Point(20, 15)])]


def test_canvas_ignores_drags_while_viewing(canvas_session):
    canvas, session = canvas_session
    canvas.mousePressEvent(_mouse(QEvent.MouseButtonPress, 10, 10))
    canvas.mouseMoveEvent(_mouse(QEvent.MouseMove, 20, 15))
    assert canvas.strokes() == []


def test_leaving_canvas_mid_drag_ends_stroke(canvas_session):
    canvas, session = canvas_session
    session.enter_annotating()

    canvas.mousePressEvent(_mouse(QEvent.MouseButtonPress, 10, 10))
    canvas.mouseMoveEvent(_mouse(QEvent.MouseMove, 20, 15))
    canvas.leaveEvent(QEvent(QEvent.Leave))
    canvas.mouseMoveEvent(_mouse(QEvent.MouseMove, 90, 90))

    assert not session.is_drawing()
    assert canvas.strokes() == [Stroke("#00ff00", [Point(10, 10), Point(20, 15)])]
