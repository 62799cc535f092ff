# weld_annote/timeutils.py
from __future__ import annotations

import math


_MS_EPSILON = 1e-6


# -----------------------------
# Time formatting / conversion
# -----------------------------

def ms_to_time_str(ms: int) -> str:
    if ms is None:
        ms = 0
    ms = max(0, int(ms))
    s = ms // 1000
    m = s // 60
    s = s % 60
    return f"{m:02d}:{s:02d}"


def seconds_to_ms_floor(sec: float) -> int:
    """
    Playback position (fractional seconds) -> whole ms, rounded down.

    A position that came from whole ms (e.g. 0.57 s) must map back to the same
    ms, so float noise just below an integer is absorbed.
    """
    if sec is None:
        return 0
    sec = float(sec)
    if math.isnan(sec) or sec <= 0:
        return 0
    return int(math.floor(sec * 1000.0 + _MS_EPSILON))


def ms_to_seconds(ms: int) -> float:
    return max(0, int(ms or 0)) / 1000.0


def timestamp_label(ms: int) -> str:
    """Picklist label, e.g. 1500 -> "1.50s"."""
    return f"{ms_to_seconds(ms):.2f}s"
