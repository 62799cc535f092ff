# weld_annote/media.py
from __future__ import annotations

import os
from typing import Optional, Tuple

from .domain import VideoSelection


# Extensions offered by the open dialog (strict)
ALLOWED_VIDEO_EXTS = {".mp4", ".mpg", ".mov"}


def ext_lower(path: str) -> str:
    _, ext = os.path.splitext(path.strip())
    return ext.lower().strip()


def video_file_filter() -> str:
    pattern = " ".join(f"*{e}" for e in sorted(ALLOWED_VIDEO_EXTS))
    return f"Video ({pattern})"


def validate_local_video_path(path: str) -> Tuple[bool, str]:
    if not path:
        return (False, "No file selected.")
    if not os.path.exists(path):
        return (False, f"File does not exist: {path}")
    if not os.path.isfile(path):
        return (False, f"Not a file: {path}")
    ext = ext_lower(path)
    if ext not in ALLOWED_VIDEO_EXTS:
        return (False, f"Unsupported file type '{ext}'. Allowed: {sorted(ALLOWED_VIDEO_EXTS)}")
    return (True, "OK")


def selection_for_path(path: Optional[str]) -> Optional[VideoSelection]:
    """
    Result of the choose-video request: None when the user cancelled.
    """
    if not path:
        return None
    return VideoSelection.from_path(os.path.abspath(path))
