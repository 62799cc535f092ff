import pytest

from weld_annote.domain import AnnotationRecord, MetaRecord, Point, Stroke, VideoSelection
from weld_annote.persistence import AnnotationStore, RecordNotFound, RecordWriteFailure
from weld_annote.session import ANNOTATING, VIEWING, AnnotationSession


@pytest.fixture
def session(video_path, player):
    return AnnotationSession.open(VideoSelection.from_path(str(video_path)), player=player)


def annotation_dir(video_path):
    return video_path.parent / "weld1_annotations"


def draw_line(session, color="#ff0000", points=((1, 1), (2, 2), (3, 3))):
    first, *rest = points
    session.begin_stroke(color, Point(*first))
    for p in rest:
        session.extend_stroke(Point(*p))
    session.end_stroke()


def test_starts_viewing_with_defaults(session):
    assert session.mode == VIEWING
    assert session.strokes == []
    assert session.notes == ""
    assert session.meta == MetaRecord()


def test_drawing_ignored_while_viewing(session):
    session.begin_stroke("#ff0000", Point(1, 1))
    session.extend_stroke(Point(2, 2))
    assert session.strokes == []
    assert not session.is_drawing()


def test_enter_annotating_pauses_and_locks_video(session, player):
    session.enter_annotating()
    assert session.mode == ANNOTATING
    assert player.paused == 1
    assert player.input_enabled is False


def test_enter_annotating_resets_working_set(session):
    session.notes = "stale"
    session.enter_annotating()
    assert session.notes == ""
    assert session.strokes == []


def test_stroke_capture(session):
    session.enter_annotating()
    draw_line(session, points=((1, 1), (2, 2)))
    draw_line(session, color="#0000ff", points=((5, 5),))
    assert session.strokes == [
        Stroke("#ff0000", [Point(1, 1), Point(2, 2)]),
        Stroke("#0000ff", [Point(5, 5)]),
    ]


def test_extend_without_stroke_in_progress_is_noop(session):
    session.enter_annotating()
    session.extend_stroke(Point(1, 1))
    draw_line(session, points=((1, 1),))
    session.extend_stroke(Point(9, 9))
    assert session.strokes == [Stroke("#ff0000", [Point(1, 1)])]


def test_end_stroke_is_idempotent(session):
    session.enter_annotating()
    session.end_stroke()
    session.end_stroke()
    assert not session.is_drawing()


def test_exit_commits_at_floored_position(session, player, video_path):
    player.position = 2.5007
    session.enter_annotating()
    draw_line(session)
    session.notes = "undercut"

    name = session.exit_annotating()

    assert name == "2500.json"
    assert session.mode == VIEWING
    assert player.input_enabled is True
    assert session.strokes == [] and session.notes == ""
    rec = session.store.get(name)
    assert rec.notes == "undercut"
    assert rec.strokes == [Stroke("#ff0000", [Point(1, 1), Point(2, 2), Point(3, 3)])]


def test_exit_also_writes_metadata(session, video_path):
    session.meta = MetaRecord(title="Butt joint", weld_type="TIG")
    session.enter_annotating()
    session.notes = "note only"
    session.exit_annotating()
    assert session.store.get_meta() == MetaRecord(title="Butt joint", weld_type="TIG")


def test_empty_working_set_writes_nothing(session, video_path):
    session.enter_annotating()
    session.notes = "   \n"
    assert session.exit_annotating() is None
    assert session.mode == VIEWING
    assert not annotation_dir(video_path).exists()


def test_commit_annotation_skips_empty(session, video_path):
    assert session.commit_annotation(100) is None
    assert not annotation_dir(video_path).exists()


def test_toggle(session):
    assert session.toggle_annotating() is None
    assert session.is_annotating()
    session.notes = "x"
    assert session.toggle_annotating() == "0.json"
    assert not session.is_annotating()


def test_load_for_editing_preloads_without_reset(session, player):
    stored = AnnotationRecord(timestamp=1234, notes="crack", strokes=[Stroke("#00ff00", [Point(4, 4)])])
    session.store.put(stored)

    rec = session.load_for_editing("1234.json")

    assert rec == stored
    assert player.seeks == [1234]
    assert session.mode == ANNOTATING
    assert session.notes == "crack"
    assert session.strokes == stored.strokes


def test_load_for_editing_pauses_before_seeking(session, player):
    session.store.put(AnnotationRecord(timestamp=2500, notes="undercut"))

    session.load_for_editing("2500.json")

    assert player.calls.index("pause") < player.calls.index("seek")
    assert player.input_enabled is False


def test_edit_loaded_record_saves_back_to_same_timestamp(session, player):
    session.store.put(AnnotationRecord(timestamp=1234, notes="crack"))
    session.load_for_editing("1234.json")
    draw_line(session)
    assert session.exit_annotating() == "1234.json"
    rec = session.store.get("1234.json")
    assert rec.notes == "crack"
    assert len(rec.strokes) == 1


def test_load_missing_record(session):
    with pytest.raises(RecordNotFound):
        session.load_for_editing("5.json")
    assert session.mode == VIEWING


def test_failed_commit_keeps_working_set(session, monkeypatch):
    def broken_put(record):
        raise RecordWriteFailure("disk full")

    monkeypatch.setattr(session.store, "put", broken_put)
    session.enter_annotating()
    draw_line(session)
    session.notes = "keep me"

    with pytest.raises(RecordWriteFailure):
        session.exit_annotating()

    assert session.mode == ANNOTATING
    assert session.notes == "keep me"
    assert len(session.strokes) == 1


def test_delete_record_leaves_annotating_without_saving(session):
    session.store.put(AnnotationRecord(timestamp=10, notes="a"))
    session.load_for_editing("10.json")

    session.delete_record("10.json")

    assert session.mode == VIEWING
    assert session.strokes == [] and session.notes == ""
    assert session.store.list() == []


def test_delete_missing_record_keeps_work(session):
    session.enter_annotating()
    session.notes = "unsaved"
    with pytest.raises(RecordNotFound):
        session.delete_record("10.json")
    assert session.notes == "unsaved"
    assert session.mode == ANNOTATING


def test_open_reads_existing_metadata(video_path):
    sel = VideoSelection.from_path(str(video_path))
    AnnotationStore(sel.annotation_dir).put_meta(MetaRecord(title="Old", weld_type="Stick"))
    session = AnnotationSession.open(sel)
    assert session.meta == MetaRecord(title="Old", weld_type="Stick")
    assert session.current_position_ms() == 0
