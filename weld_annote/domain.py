# weld_annote/domain.py
from __future__ import annotations

import ntpath
import posixpath
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence


# -----------------------------
# Constants
# -----------------------------

ANNOTATION_DIR_SUFFIX = "_annotations"

DEFAULT_PEN_COLOR = "#ff0000"

# Shown in the weld type combo; "Other" catches values missing from the list.
DEFAULT_WELD_TYPES: List[str] = ["MIG", "TIG", "Stick", "Flux-Cored", "Other"]
OTHER_WELD_TYPE = "Other"


def _is_number(v) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


# -----------------------------
# Strokes
# -----------------------------

@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def to_dict(self) -> Dict:
        return {"x": self.x, "y": self.y}

    @staticmethod
    def from_dict(d: Dict) -> "Point":
        if not isinstance(d, dict):
            raise ValueError("point must be an object")
        x, y = d.get("x"), d.get("y")
        if not (_is_number(x) and _is_number(y)):
            raise ValueError("point x/y must be numbers")
        return Point(x=float(x), y=float(y))


@dataclass
class Stroke:
    """
    One continuous pointer drag. Points are only ever appended while capturing.
    """
    color: str
    points: List[Point] = field(default_factory=list)

    def is_degenerate(self) -> bool:
        return not self.points

    def to_dict(self) -> Dict:
        return {
            "color": self.color,
            "points": [p.to_dict() for p in self.points],
        }

    @staticmethod
    def from_dict(d: Dict) -> "Stroke":
        if not isinstance(d, dict):
            raise ValueError("stroke must be an object")
        color = d.get("color")
        if not isinstance(color, str):
            raise ValueError("stroke color must be a string")
        raw_points = d.get("points")
        if not isinstance(raw_points, list):
            raise ValueError("stroke points must be a list")
        return Stroke(color=color, points=[Point.from_dict(p) for p in raw_points])


# -----------------------------
# Records
# -----------------------------

@dataclass
class AnnotationRecord:
    """
    Notes + ink attached to one video frame.
    The timestamp (ms) is the identity key; the file name is derived from it.
    """
    timestamp: int
    notes: str = ""
    strokes: List[Stroke] = field(default_factory=list)

    @property
    def name(self) -> str:
        return record_filename(self.timestamp)

    def is_empty(self) -> bool:
        return not self.strokes and not (self.notes or "").strip()

    def without_degenerate_strokes(self) -> "AnnotationRecord":
        return AnnotationRecord(
            timestamp=self.timestamp,
            notes=self.notes,
            strokes=[s for s in self.strokes if not s.is_degenerate()],
        )

    def to_dict(self) -> Dict:
        return {
            "timestamp": int(self.timestamp),
            "notes": self.notes or "",
            "strokes": [s.to_dict() for s in self.strokes],
        }

    @staticmethod
    def from_dict(d: Dict) -> "AnnotationRecord":
        if not isinstance(d, dict):
            raise ValueError("record must be an object")
        ts = d.get("timestamp")
        if not isinstance(ts, int) or isinstance(ts, bool):
            raise ValueError("timestamp must be an integer")
        if ts < 0:
            raise ValueError("timestamp must be >= 0")
        notes = d.get("notes", "")
        if notes is None:
            notes = ""
        if not isinstance(notes, str):
            raise ValueError("notes must be a string")
        raw_strokes = d.get("strokes", [])
        if raw_strokes is None:
            raw_strokes = []
        if not isinstance(raw_strokes, list):
            raise ValueError("strokes must be a list")
        return AnnotationRecord(
            timestamp=ts,
            notes=notes,
            strokes=[Stroke.from_dict(s) for s in raw_strokes],
        )


@dataclass
class MetaRecord:
    """
    Stored once per annotation directory as meta.json.
    """
    title: str = ""
    weld_type: str = DEFAULT_WELD_TYPES[0]

    def to_dict(self) -> Dict:
        return {"title": self.title or "", "weldType": self.weld_type or ""}

    @staticmethod
    def from_dict(d: Dict) -> "MetaRecord":
        if not isinstance(d, dict):
            raise ValueError("meta must be an object")
        return MetaRecord(
            title=str(d.get("title") or ""),
            weld_type=str(d.get("weldType") or DEFAULT_WELD_TYPES[0]),
        )


@dataclass(frozen=True)
class StoreEntry:
    """One row of the annotation picklist."""
    name: str
    timestamp: int


def record_filename(timestamp_ms: int) -> str:
    return f"{int(timestamp_ms)}.json"


def parse_record_filename(name: str) -> Optional[int]:
    """
    "1500.json" -> 1500. Returns None for anything that is not a
    non-negative integer stem with a .json suffix.
    """
    if not name or not name.endswith(".json"):
        return None
    stem = name[: -len(".json")]
    if not stem.isdigit():
        return None
    return int(stem)


def normalize_weld_type(value: str, choices: Sequence[str]) -> str:
    if value in choices:
        return value
    return OTHER_WELD_TYPE


# -----------------------------
# Video selection
# -----------------------------

def _split_video_path(video_path: str):
    p = str(video_path or "").replace(ntpath.sep, posixpath.sep)
    folder = posixpath.dirname(p)
    base, _ext = posixpath.splitext(posixpath.basename(p))
    return folder, base


def derive_annotation_dir(video_path: str) -> str:
    """
    <video folder>/<video basename>_annotations

    Backslash and forward-slash separators are treated alike, so the same
    video always resolves to the same directory.
    """
    folder, base = _split_video_path(video_path)
    return posixpath.join(folder, base + ANNOTATION_DIR_SUFFIX)


@dataclass(frozen=True)
class VideoSelection:
    file_path: str
    folder: str
    base_name: str
    annotation_dir: str

    @property
    def folder_name(self) -> str:
        return posixpath.basename(self.folder.rstrip(posixpath.sep))

    @staticmethod
    def from_path(video_path: str) -> "VideoSelection":
        folder, base = _split_video_path(video_path)
        return VideoSelection(
            file_path=str(video_path),
            folder=folder,
            base_name=base,
            annotation_dir=derive_annotation_dir(video_path),
        )


# -----------------------------
# App config payload
# -----------------------------

@dataclass
class AppConfig:
    """
    Stored in <config_dir>/config.json
    """
    last_video_dir: str = ""
    pen_color: str = DEFAULT_PEN_COLOR
    weld_types: List[str] = field(default_factory=lambda: list(DEFAULT_WELD_TYPES))

    def to_dict(self) -> Dict:
        return {
            "last_video_dir": self.last_video_dir,
            "pen_color": self.pen_color,
            "weld_types": list(self.weld_types),
            "config_version": 1,
        }

    @staticmethod
    def from_dict(d: Dict) -> "AppConfig":
        types = [str(t) for t in (d.get("weld_types") or []) if str(t).strip()]
        if not types:
            types = list(DEFAULT_WELD_TYPES)
        if OTHER_WELD_TYPE not in types:
            types.append(OTHER_WELD_TYPE)
        return AppConfig(
            last_video_dir=str(d.get("last_video_dir") or ""),
            pen_color=str(d.get("pen_color") or DEFAULT_PEN_COLOR),
            weld_types=types,
        )
