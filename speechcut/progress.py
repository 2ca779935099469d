from __future__ import annotations

from typing import Optional

from speechcut.types import ProgressCallback

# Milestone bands on the 0..100 scale.
VALIDATE = 5.0
DECODE_START = 10.0
DECODE_DONE = 25.0
RESAMPLE_START = 35.0
RESAMPLE_DONE = 45.0
CLASSIFY_START = 50.0
CLASSIFY_ANALYZE = 60.0
CLASSIFY_DONE = 75.0
EXTRACT = 80.0
MERGE_START = 90.0
MERGE_DONE = 95.0
COMPLETE = 100.0


def _clamp(x: float, lo: float, hi: float) -> float:
    return float(min(max(x, lo), hi))


def report_progress(
    progress: Optional[ProgressCallback],
    step: str,
    percent: float,
    details: Optional[str] = None,
    *,
    lo: float = 0.0,
    hi: float = COMPLETE,
) -> None:
    """Forward a progress value clamped into [lo, hi] (and 0..100)."""
    if progress is None:
        return
    value = _clamp(float(percent), max(0.0, float(lo)), min(COMPLETE, float(hi)))
    progress(str(step), value, details)
