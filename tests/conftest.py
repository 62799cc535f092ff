import os
import sys
from pathlib import Path

import pytest


# Ensure `import weld_annote` works without an install by putting the repo root
# on sys.path.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Qt drawing tests never need a real display.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from weld_annote.domain import AnnotationRecord, Point, Stroke


class FakePlayer:
    """Stands in for VideoView on the session's playback boundary."""

    def __init__(self, position_seconds: float = 0.0) -> None:
        self.position = position_seconds
        self.paused = 0
        self.input_enabled = True
        self.seeks = []
        self.calls = []

    def position_seconds(self) -> float:
        return self.position

    def seek_ms(self, ms: int) -> None:
        self.calls.append("seek")
        self.seeks.append(ms)
        self.position = ms / 1000.0

    def pause(self) -> None:
        self.calls.append("pause")
        self.paused += 1

    def set_input_enabled(self, enabled: bool) -> None:
        self.input_enabled = enabled


@pytest.fixture
def player():
    return FakePlayer()


@pytest.fixture
def video_path(tmp_path):
    p = tmp_path / "videos" / "weld1.mp4"
    p.parent.mkdir()
    p.write_bytes(b"")
    return p


def make_record(timestamp=1500, notes="porosity at root", strokes=None):
    if strokes is None:
        strokes = [
            Stroke(color="#ff0000", points=[Point(10, 20), Point(15.5, 22.25), Point(30, 40)]),
            Stroke(color="rgb(0, 0, 255)", points=[Point(5, 5)]),
        ]
    return AnnotationRecord(timestamp=timestamp, notes=notes, strokes=strokes)


@pytest.fixture(scope="session")
def qapp():
    from PyQt5.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    yield app
