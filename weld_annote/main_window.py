# weld_annote/main_window.py
from __future__ import annotations

import logging
import os
from typing import Optional

from PyQt5.QtCore import Qt
from PyQt5.QtGui import QColor
from PyQt5.QtWidgets import (
    QColorDialog,
    QFileDialog,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QSplitter,
    QTextEdit,
    QVBoxLayout,
    QWidget,
)

from .domain import AppConfig, MetaRecord, VideoSelection
from .media import selection_for_path, validate_local_video_path, video_file_filter
from .persistence import StoreError, save_app_config
from .session import AnnotationSession
from .timeutils import ms_to_time_str
from .widgets.annotation_list import AnnotationList
from .widgets.marker_slider import MarkerSlider
from .widgets.meta_panel import MetaPanel
from .widgets.video_view import VideoView

logger = logging.getLogger(__name__)


WINDOW_TITLE = "Video Annotator"


class MainWindow(QMainWindow):
    def __init__(self, cfg: Optional[AppConfig] = None, config_dir: Optional[str] = None):
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)
        self.resize(1000, 900)

        self.cfg: AppConfig = cfg or AppConfig()
        self._config_dir = config_dir

        # One session per chosen video
        self.session: Optional[AnnotationSession] = None

        # Slider update guard
        self._ignore_slider_updates = False
        # Notes box update guard
        self._updating_notes = False

        self._build_ui()
        self.meta_panel.set_weld_types(self.cfg.weld_types)
        self._update_pen_button()
        self._update_enabled_state()

    # ---------------- UI ----------------

    def _build_ui(self):
        central = QWidget()
        self.setCentralWidget(central)

        main_layout = QVBoxLayout(central)
        main_layout.setContentsMargins(6, 6, 6, 6)
        main_layout.setSpacing(6)

        # ===== Top: video chooser =====
        top = QHBoxLayout()
        self.btn_open = QPushButton("Open Video")
        self.btn_open.clicked.connect(self.choose_video)
        self.video_label = QLabel("No video loaded")
        self.video_label.setTextInteractionFlags(Qt.TextSelectableByMouse)
        top.addWidget(self.btn_open)
        top.addWidget(self.video_label, stretch=1)
        main_layout.addLayout(top)

        split = QSplitter(Qt.Horizontal)
        main_layout.addWidget(split, stretch=1)

        # ===== Left: video + transport =====
        left = QWidget()
        left_lay = QVBoxLayout(left)
        left_lay.setContentsMargins(0, 0, 0, 0)
        left_lay.setSpacing(6)

        self.video_view = VideoView()
        self.video_view.position_changed.connect(self._on_position)
        self.video_view.duration_changed.connect(self._on_duration)
        self.video_view.playing_changed.connect(lambda _p: self._update_play_pause_buttons())
        self.video_view.input_enabled_changed.connect(lambda _e: self._update_enabled_state())
        self.video_view.canvas.set_color_provider(lambda: self.cfg.pen_color)
        left_lay.addWidget(self.video_view, stretch=1)

        play_bar = QHBoxLayout()
        play_bar.setSpacing(8)
        self.btn_play = QPushButton("Play")
        self.btn_pause = QPushButton("Pause")
        self.btn_play.clicked.connect(self.video_view.play)
        self.btn_pause.clicked.connect(self.video_view.pause)
        self.timeline_label = QLabel("00:00 / 00:00")
        play_bar.addWidget(self.btn_play)
        play_bar.addWidget(self.btn_pause)
        play_bar.addSpacing(12)
        play_bar.addWidget(self.timeline_label)
        play_bar.addStretch()
        left_lay.addLayout(play_bar)

        self.slider = MarkerSlider(Qt.Horizontal)
        self.slider.setRange(0, 0)
        self.slider.sliderMoved.connect(self._on_slider_moved)
        left_lay.addWidget(self.slider)

        # ===== Right: meta, notes, pen, annotations =====
        right = QWidget()
        right_lay = QVBoxLayout(right)
        right_lay.setContentsMargins(0, 0, 0, 0)
        right_lay.setSpacing(6)

        self.meta_panel = MetaPanel()
        self.meta_panel.meta_changed.connect(self._on_meta_changed)
        right_lay.addWidget(self.meta_panel)

        notes_box = QGroupBox("Notes")
        notes_lay = QVBoxLayout(notes_box)
        notes_lay.setContentsMargins(6, 6, 6, 6)
        self.notes_edit = QTextEdit()
        self.notes_edit.setPlaceholderText("Notes for this frame...")
        self.notes_edit.textChanged.connect(self._on_notes_changed)
        notes_lay.addWidget(self.notes_edit)
        right_lay.addWidget(notes_box, stretch=1)

        mode_bar = QHBoxLayout()
        self.btn_pen = QPushButton("Pen Color")
        self.btn_pen.clicked.connect(self._choose_pen_color)
        self.btn_edit = QPushButton("Edit")
        self.btn_save = QPushButton("Save")
        self.btn_edit.clicked.connect(self._toggle_annotating)
        self.btn_save.clicked.connect(self._toggle_annotating)
        mode_bar.addWidget(self.btn_pen)
        mode_bar.addStretch()
        mode_bar.addWidget(self.btn_edit)
        mode_bar.addWidget(self.btn_save)
        right_lay.addLayout(mode_bar)

        self.annotation_list = AnnotationList()
        self.annotation_list.entry_selected.connect(self._on_entry_selected)
        self.annotation_list.delete_requested.connect(self._on_delete_requested)
        right_lay.addWidget(self.annotation_list, stretch=2)

        split.addWidget(left)
        split.addWidget(right)
        split.setStretchFactor(0, 4)
        split.setStretchFactor(1, 1)

        for w in (self.btn_open, self.btn_play, self.btn_pause, self.btn_pen, self.btn_edit, self.btn_save):
            w.setCursor(Qt.PointingHandCursor)

    # ---------------- Video selection ----------------

    def choose_video(self) -> None:
        start_dir = self.cfg.last_video_dir if os.path.isdir(self.cfg.last_video_dir or "") else ""
        path, _ = QFileDialog.getOpenFileName(self, "Open Video", start_dir, video_file_filter())
        if path:
            self.open_video(path)

    def open_video(self, path: str) -> bool:
        ok, msg = validate_local_video_path(path)
        if not ok:
            QMessageBox.warning(self, "Cannot open video", msg)
            return False

        if self.session is not None and self.session.is_annotating():
            if not self._leave_annotating():
                return False

        selection = selection_for_path(path)
        if selection is None:
            return False
        self._start_session(selection)

        self.cfg.last_video_dir = selection.folder
        self._save_config()
        return True

    def _start_session(self, selection: VideoSelection) -> None:
        self.video_view.load(selection.file_path)
        self.session = AnnotationSession.open(selection, player=self.video_view)
        self.video_view.canvas.set_session(self.session)
        self.video_view.set_input_enabled(True)

        self.setWindowTitle(f"{WINDOW_TITLE}: {selection.folder_name}")
        self.video_label.setText(selection.file_path)
        self.meta_panel.set_meta(self.session.meta)
        self.session.meta = self.meta_panel.meta()
        self._sync_notes_from_session()
        self._reload_entries()
        self._update_enabled_state()
        logger.info("Opened %s (annotations in %s)", selection.file_path, selection.annotation_dir)

    # ---------------- Annotating ----------------

    def _toggle_annotating(self) -> None:
        if self.session is None:
            return
        if self.session.is_annotating():
            self._leave_annotating()
        else:
            self.session.enter_annotating()
            self._sync_notes_from_session()
            self.video_view.canvas.update()
        self._update_enabled_state()

    def _leave_annotating(self) -> bool:
        """Commit + return to viewing. On a store failure the work stays on screen."""
        assert self.session is not None
        try:
            name = self.session.exit_annotating()
        except StoreError as e:
            logger.error("Saving annotation failed: %s", e)
            QMessageBox.warning(self, "Save failed", str(e))
            return False
        if name:
            self._reload_entries()
        self._sync_notes_from_session()
        self.video_view.canvas.update()
        self._update_enabled_state()
        return True

    def _on_entry_selected(self, name: str) -> None:
        if self.session is None:
            return
        try:
            self.session.load_for_editing(name)
        except StoreError as e:
            QMessageBox.warning(self, "Cannot load annotation", str(e))
            self._reload_entries()
            return
        self._sync_notes_from_session()
        self.video_view.canvas.update()
        self._update_enabled_state()

    def _on_delete_requested(self, name: str) -> None:
        if self.session is None:
            return
        if not self.session.store.exists(name):
            QMessageBox.warning(self, "Delete failed", f"{name} no longer exists.")
            self._reload_entries()
            return
        try:
            self.session.delete_record(name)
        except StoreError as e:
            QMessageBox.warning(self, "Delete failed", str(e))
            return
        self._sync_notes_from_session()
        self.video_view.canvas.update()
        self._reload_entries()
        self._update_enabled_state()

    def _on_notes_changed(self) -> None:
        if self._updating_notes or self.session is None:
            return
        self.session.notes = self.notes_edit.toPlainText()

    def _sync_notes_from_session(self) -> None:
        self._updating_notes = True
        try:
            self.notes_edit.setPlainText(self.session.notes if self.session else "")
        finally:
            self._updating_notes = False

    def _on_meta_changed(self, meta: MetaRecord) -> None:
        if self.session is not None:
            self.session.meta = meta

    def _reload_entries(self) -> None:
        entries = []
        if self.session is not None:
            try:
                entries = self.session.store.list()
            except StoreError as e:
                QMessageBox.warning(self, "Cannot list annotations", str(e))
        self.annotation_list.set_entries(entries)
        self.slider.set_markers([e.timestamp for e in entries])

    # ---------------- Pen ----------------

    def _choose_pen_color(self) -> None:
        c = QColorDialog.getColor(QColor(self.cfg.pen_color), self, "Pen Color")
        if not c.isValid():
            return
        self.cfg.pen_color = c.name()
        self._update_pen_button()
        self._save_config()

    def _update_pen_button(self) -> None:
        self.btn_pen.setStyleSheet(f"border-left: 12px solid {self.cfg.pen_color};")

    def _save_config(self) -> None:
        try:
            save_app_config(self.cfg, self._config_dir)
        except OSError as e:
            logger.warning("Could not save config: %s", e)

    # ---------------- Playback + slider ----------------

    def _on_duration(self, dur_ms: int):
        self._ignore_slider_updates = True
        try:
            self.slider.setRange(0, max(0, int(dur_ms)))
        finally:
            self._ignore_slider_updates = False
        self._update_timeline_label(self.video_view.position_ms(), dur_ms)

    def _on_position(self, pos_ms: int):
        if self._ignore_slider_updates or self.slider.isSliderDown():
            return
        self._ignore_slider_updates = True
        try:
            self.slider.setValue(max(0, int(pos_ms)))
        finally:
            self._ignore_slider_updates = False
        self._update_timeline_label(pos_ms, self.video_view.duration_ms())

    def _on_slider_moved(self, pos):
        if self.session is None or not self.video_view.input_enabled():
            return
        p = int(max(0, min(int(pos), int(self.slider.maximum()))))
        self.video_view.seek_ms(p)
        self._update_timeline_label(p, self.slider.maximum())

    def _update_timeline_label(self, pos_ms: int, dur_ms: int):
        self.timeline_label.setText(f"{ms_to_time_str(pos_ms)} / {ms_to_time_str(dur_ms)}")

    def _update_play_pause_buttons(self) -> None:
        viewing = self.session is not None and not self.session.is_annotating()
        playing = self.video_view.is_playing()
        self.btn_play.setEnabled(viewing and not playing)
        self.btn_pause.setEnabled(viewing and playing)

    # ---------------- Helpers ----------------

    def _update_enabled_state(self):
        has_session = self.session is not None
        annotating = has_session and self.session.is_annotating()

        self.btn_edit.setEnabled(has_session and not annotating)
        self.btn_save.setEnabled(annotating)
        self.notes_edit.setReadOnly(not annotating)
        self.slider.setEnabled(has_session and not annotating)
        self.annotation_list.setEnabled(has_session)
        self.meta_panel.setEnabled(has_session)

        self._update_play_pause_buttons()

    def closeEvent(self, event):
        if self.session is not None and self.session.is_annotating():
            if not self._leave_annotating():
                resp = QMessageBox.question(
                    self,
                    "Discard annotation?",
                    "The current annotation could not be saved. Close anyway?",
                    QMessageBox.Yes | QMessageBox.No,
                    QMessageBox.No,
                )
                if resp != QMessageBox.Yes:
                    event.ignore()
                    return
        self._save_config()
        self.video_view.clear()
        super().closeEvent(event)
