import os

from weld_annote.media import selection_for_path, validate_local_video_path, video_file_filter


def test_filter_lists_allowed_types():
    assert video_file_filter() == "Video (*.mov *.mp4 *.mpg)"


def test_validate_accepts_known_extensions_any_case(tmp_path):
    p = tmp_path / "weld1.MOV"
    p.write_bytes(b"")
    assert validate_local_video_path(str(p)) == (True, "OK")


def test_validate_rejects_missing_dirs_and_other_types(tmp_path):
    assert validate_local_video_path("")[0] is False
    assert validate_local_video_path(str(tmp_path / "nope.mp4"))[0] is False
    assert validate_local_video_path(str(tmp_path))[0] is False
    other = tmp_path / "clip.mkv"
    other.write_bytes(b"")
    ok, msg = validate_local_video_path(str(other))
    assert not ok and ".mkv" in msg


def test_selection_for_path(video_path):
    sel = selection_for_path(str(video_path))
    assert sel.base_name == "weld1"
    assert sel.annotation_dir == str(video_path.parent / "weld1_annotations").replace(os.sep, "/")


def test_cancelled_choice_is_none():
    assert selection_for_path(None) is None
    assert selection_for_path("") is None
