# weld_annote/__init__.py
'''
weld_annote/
    __init__.py
    __main__.py            # argument parsing

    app.py                 # QApplication + logging + config + first video prompt
    main_window.py         # QMainWindow layout + wiring

    domain.py              # dataclasses: Point, Stroke, AnnotationRecord, MetaRecord, VideoSelection, AppConfig
    persistence.py         # AnnotationStore (<video>_annotations/*.json), store errors, app config.json
    session.py             # AnnotationSession: viewing/annotating modes, working strokes + notes, commit/load/delete
    media.py               # allowed video types, open-dialog filter, choose-video result
    timeutils.py           # seconds<->ms, picklist and clock labels

    widgets/
      stroke_canvas.py     # render_strokes + transparent ink overlay
      video_view.py        # QMediaPlayer + video item + canvas overlay (playback boundary)
      marker_slider.py     # scrub slider with annotation ticks
      annotation_list.py   # timestamp picklist + delete
      meta_panel.py        # title + weld type
'''

from __future__ import annotations

__all__ = ["__version__", "run_app"]

__version__ = "0.1.0"


def run_app(*args, **kwargs) -> int:
    # Qt (and QtMultimedia) load only when the UI actually starts
    from .app import run_app as _run_app
    return _run_app(*args, **kwargs)
