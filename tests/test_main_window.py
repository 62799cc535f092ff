import os

import pytest
from PyQt5.QtCore import Qt
from PyQt5.QtWidgets import QMessageBox

pytest.importorskip("PyQt5.QtMultimedia")

from weld_annote.domain import AnnotationRecord, AppConfig
from weld_annote.persistence import StoreError


@pytest.fixture
def video_view(qapp):
    from weld_annote.widgets.video_view import VideoView

    view = VideoView()
    view.resize(320, 180)
    return view


@pytest.fixture
def shown_warnings(monkeypatch):
    shown = []
    monkeypatch.setattr(QMessageBox, "warning", lambda *args, **kwargs: shown.append(args[1:3]))
    return shown


@pytest.fixture
def window(qapp, tmp_path, video_path, shown_warnings):
    from weld_annote.main_window import MainWindow

    win = MainWindow(cfg=AppConfig(), config_dir=str(tmp_path / "config"))
    assert win.open_video(str(video_path))
    return win


def list_labels(win):
    lst = win.annotation_list.list
    return [lst.item(i).text() for i in range(lst.count())]


def test_input_goes_to_canvas_while_annotating(video_view):
    played = []
    video_view._player.play = lambda: played.append(True)

    video_view.set_input_enabled(False)
    assert not video_view.canvas.testAttribute(Qt.WA_TransparentForMouseEvents)
    video_view.play()
    assert played == []

    video_view.set_input_enabled(True)
    assert video_view.canvas.testAttribute(Qt.WA_TransparentForMouseEvents)
    video_view.play()
    assert played == [True]


def test_edit_and_save_buttons_follow_mode(window):
    assert window.btn_edit.isEnabled()
    assert not window.btn_save.isEnabled()
    assert window.notes_edit.isReadOnly()

    window._toggle_annotating()
    assert window.session.is_annotating()
    assert not window.btn_edit.isEnabled()
    assert window.btn_save.isEnabled()
    assert not window.notes_edit.isReadOnly()
    assert not window.slider.isEnabled()

    window._toggle_annotating()
    assert not window.session.is_annotating()
    assert window.btn_edit.isEnabled()
    assert not window.btn_save.isEnabled()


def test_list_refreshes_after_commit_and_delete(window, shown_warnings):
    assert list_labels(window) == []

    window._toggle_annotating()
    window.notes_edit.setPlainText("lack of fusion")
    window._toggle_annotating()

    assert list_labels(window) == ["0.00s"]
    assert window.slider._markers == [0]
    assert window.session.store.get("0.json").notes == "lack of fusion"

    window._on_delete_requested("0.json")

    assert list_labels(window) == []
    assert window.slider._markers == []
    assert shown_warnings == []


def test_delete_of_vanished_record_warns_and_refreshes(window, shown_warnings):
    store = window.session.store
    store.put(AnnotationRecord(timestamp=0, notes="spatter"))
    window._reload_entries()
    os.remove(os.path.join(store.annotation_dir, "0.json"))

    window._on_delete_requested("0.json")

    assert [title for title, _ in shown_warnings] == ["Delete failed"]
    assert list_labels(window) == []


def test_listing_failure_shows_warning_and_empty_list(window, shown_warnings, monkeypatch):
    def broken_list():
        raise StoreError("Could not list annotations: permission denied")

    monkeypatch.setattr(window.session.store, "list", broken_list)
    window._reload_entries()

    assert [title for title, _ in shown_warnings] == ["Cannot list annotations"]
    assert list_labels(window) == []
