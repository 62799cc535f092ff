# weld_annote/session.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .domain import (
    AnnotationRecord,
    MetaRecord,
    Point,
    Stroke,
    VideoSelection,
)
from .persistence import AnnotationStore, RecordNotFound
from .timeutils import seconds_to_ms_floor

logger = logging.getLogger(__name__)


VIEWING = "viewing"
ANNOTATING = "annotating"


@dataclass
class AnnotationSession:
    """
    Everything that belongs to the currently chosen video.

    Created when a video is chosen and thrown away when another one is. Owns
    the working set (strokes + notes being edited) and the current mode; the
    store owns what is on disk.

    `player` is the playback boundary. It needs:
      position_seconds() -> float
      seek_ms(ms)
      pause()
      set_input_enabled(bool)   # video accepts input only while viewing
    """
    video: VideoSelection
    store: AnnotationStore
    player: Optional[object] = None

    mode: str = VIEWING
    strokes: List[Stroke] = field(default_factory=list)
    notes: str = ""
    meta: MetaRecord = field(default_factory=MetaRecord)

    _current: Optional[Stroke] = field(default=None, repr=False)

    @staticmethod
    def open(video: VideoSelection, player=None) -> "AnnotationSession":
        store = AnnotationStore(video.annotation_dir)
        return AnnotationSession(video=video, store=store, player=player, meta=store.get_meta())

    # ---------------- Working set ----------------

    def is_annotating(self) -> bool:
        return self.mode == ANNOTATING

    def has_content(self) -> bool:
        return bool(self.strokes) or bool((self.notes or "").strip())

    def begin_stroke(self, color: str, point: Point) -> None:
        if not self.is_annotating():
            return
        self._current = Stroke(color=color, points=[point])
        self.strokes.append(self._current)

    def extend_stroke(self, point: Point) -> None:
        if self._current is None or not self.is_annotating():
            return
        self._current.points.append(point)

    def end_stroke(self) -> None:
        self._current = None

    def is_drawing(self) -> bool:
        return self._current is not None

    def reset(self) -> None:
        self._current = None
        self.strokes = []
        self.notes = ""

    def working_record(self, timestamp_ms: int) -> AnnotationRecord:
        return AnnotationRecord(
            timestamp=int(timestamp_ms),
            notes=self.notes,
            strokes=[Stroke(color=s.color, points=list(s.points)) for s in self.strokes],
        )

    # ---------------- Mode transitions ----------------

    def enter_annotating(self, preload: Optional[AnnotationRecord] = None) -> None:
        """
        VIEWING -> ANNOTATING. A preloaded record becomes the working set;
        otherwise the working set starts empty.
        """
        if preload is not None:
            self._current = None
            self.strokes = list(preload.strokes)
            self.notes = preload.notes or ""
        elif not self.is_annotating():
            self.reset()

        self.mode = ANNOTATING
        if self.player is not None:
            self.player.pause()
            self.player.set_input_enabled(False)

    def exit_annotating(self) -> Optional[str]:
        """
        ANNOTATING -> VIEWING, committing the working set at the current
        playback position when there is anything to save.

        Returns the stored record name, or None if nothing was written. If the
        commit raises, the session stays in ANNOTATING with its working set.
        """
        if not self.is_annotating():
            return None

        self.end_stroke()
        name = None
        if self.has_content():
            name = self.commit_annotation(self.current_position_ms())

        self.reset()
        self.mode = VIEWING
        if self.player is not None:
            self.player.set_input_enabled(True)
        return name

    def toggle_annotating(self) -> Optional[str]:
        if self.is_annotating():
            return self.exit_annotating()
        self.enter_annotating()
        return None

    def current_position_ms(self) -> int:
        if self.player is None:
            return 0
        return seconds_to_ms_floor(self.player.position_seconds())

    # ---------------- Store flows ----------------

    def commit_annotation(self, timestamp_ms: int) -> Optional[str]:
        """
        Saves the working set as the record for `timestamp_ms`.

        Two effects, in order:
          1. write <timestamp>.json (replacing any record at that timestamp)
          2. overwrite meta.json with the current title/weld type

        An empty working set writes nothing and returns None.
        """
        if not self.has_content():
            return None
        name = self.store.put(self.working_record(timestamp_ms))
        self.store.put_meta(self.meta)
        logger.info("Committed annotation %s for %s", name, self.video.base_name)
        return name

    def load_for_editing(self, name: str) -> AnnotationRecord:
        """
        Loads a stored record into the working set, seeks to its frame and
        switches to ANNOTATING.
        """
        rec = self.store.get(name)
        if rec is None:
            raise RecordNotFound(f"No annotation named {name}")
        self.enter_annotating(preload=rec)
        if self.player is not None:
            self.player.seek_ms(rec.timestamp)
        return rec

    def delete_record(self, name: str) -> None:
        """
        Deletes a stored record, clears the working set and leaves ANNOTATING.
        Nothing is committed on the way out because the working set is empty.
        """
        self.store.delete(name)
        self.reset()
        if self.is_annotating():
            self.exit_annotating()
