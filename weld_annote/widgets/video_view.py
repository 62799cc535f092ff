# weld_annote/widgets/video_view.py
from __future__ import annotations

import os
from typing import Optional

from PyQt5.QtCore import Qt, QRectF, QSize, QSizeF, QUrl, pyqtSignal
from PyQt5.QtGui import QColor
from PyQt5.QtMultimedia import QMediaContent, QMediaPlayer
from PyQt5.QtMultimediaWidgets import QGraphicsVideoItem
from PyQt5.QtWidgets import (
    QFrame,
    QGraphicsScene,
    QGraphicsView,
    QSizePolicy,
    QWidget,
)

from .stroke_canvas import StrokeCanvas


class VideoView(QWidget):
    """
    One QMediaPlayer rendered into a graphics view, with the ink canvas stacked on top.

    This is the playback side of the session:
      - position_seconds() / seek_ms(ms)
      - pause()
      - set_input_enabled(bool): video + transport accept input only while viewing;
        the canvas accepts pointer input only while annotating.

    The canvas always covers the same rect as the video, so stroke coordinates
    are canvas-local pixels.
    """

    # Emitted with the player position (ms)
    position_changed = pyqtSignal(int)
    # Emitted with the media duration (ms)
    duration_changed = pyqtSignal(int)
    # Emitted when the playing/paused state flips
    playing_changed = pyqtSignal(bool)
    # Emitted when input is handed between video (True) and canvas (False)
    input_enabled_changed = pyqtSignal(bool)

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)

        self._scene = QGraphicsScene(self)
        self._scene.setBackgroundBrush(QColor("black"))
        self._item = QGraphicsVideoItem()
        self._scene.addItem(self._item)

        self._view = QGraphicsView(self._scene, self)
        self._view.setFrameShape(QFrame.NoFrame)
        self._view.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self._view.setVerticalScrollBarPolicy(Qt.ScrollBarAlwaysOff)

        self.canvas = StrokeCanvas(self)
        self.canvas.raise_()

        self._player = QMediaPlayer(self, QMediaPlayer.VideoSurface)
        self._player.setVideoOutput(self._item)
        self._player.positionChanged.connect(lambda pos: self.position_changed.emit(int(pos)))
        self._player.durationChanged.connect(lambda dur: self.duration_changed.emit(int(dur or 0)))
        self._player.stateChanged.connect(lambda st: self.playing_changed.emit(st == QMediaPlayer.PlayingState))

        self._input_enabled = True
        self.set_input_enabled(True)

    # ---------------- Media ----------------

    def load(self, path: str) -> None:
        self._player.stop()
        if path and os.path.exists(path):
            self._player.setMedia(QMediaContent(QUrl.fromLocalFile(path)))
            self._prime_first_frame()
        else:
            self._player.setMedia(QMediaContent())

    def clear(self) -> None:
        self._player.stop()
        self._player.setMedia(QMediaContent())

    def _prime_first_frame(self) -> None:
        """Show the first frame without starting playback."""
        self._player.setPosition(0)
        self._player.play()
        self._player.pause()

    # ---------------- Playback boundary ----------------

    def play(self) -> None:
        if self._input_enabled:
            self._player.play()

    def pause(self) -> None:
        self._player.pause()

    def is_playing(self) -> bool:
        return self._player.state() == QMediaPlayer.PlayingState

    def position_ms(self) -> int:
        return int(self._player.position() or 0)

    def position_seconds(self) -> float:
        return self.position_ms() / 1000.0

    def duration_ms(self) -> int:
        return int(self._player.duration() or 0)

    def seek_ms(self, ms: int) -> None:
        self._player.setPosition(int(max(0, ms)))

    def set_input_enabled(self, enabled: bool) -> None:
        self._input_enabled = bool(enabled)
        self._view.setEnabled(self._input_enabled)
        self.canvas.set_accepts_input(not self._input_enabled)
        self.input_enabled_changed.emit(self._input_enabled)

    def input_enabled(self) -> bool:
        return self._input_enabled

    # ---------------- Geometry ----------------

    def resizeEvent(self, event):
        super().resizeEvent(event)
        r = self.rect()
        self._view.setGeometry(r)
        self.canvas.setGeometry(r)
        self._item.setSize(QSizeF(r.width(), r.height()))
        self._scene.setSceneRect(QRectF(0, 0, r.width(), r.height()))
        self.canvas.raise_()

    def sizeHint(self) -> QSize:
        return QSize(960, 540)

    def minimumSizeHint(self) -> QSize:
        return QSize(320, 180)
