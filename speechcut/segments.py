"""Turning chunk labels into speech segments, and merging close segments."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

import numpy as np

from speechcut import progress as milestones
from speechcut.audio.wav import encode_wav_base64
from speechcut.errors import InvalidRangeError
from speechcut.progress import report_progress
from speechcut.types import ChunkLabel, ProgressCallback, Segment

logger = logging.getLogger(__name__)

DEFAULT_MAX_GAP_SEC = 1.5


def extract_samples(samples: np.ndarray, start_sample: int, end_sample: int) -> np.ndarray:
    """Copy of samples[start:end] with both bounds clamped to the buffer."""
    n = int(samples.size)
    start_idx = min(max(0, int(start_sample)), n)
    end_idx = min(max(0, int(end_sample)), n)
    if end_idx <= start_idx:
        return np.zeros((0,), dtype=samples.dtype)
    return samples[start_idx:end_idx].copy()


def extract_time_range(samples: np.ndarray, sample_rate: int, start_s: float, end_s: float) -> np.ndarray:
    n = int(samples.size)
    start_idx = min(max(0, int(float(start_s) * float(sample_rate))), n)
    end_idx = min(max(0, int(float(end_s) * float(sample_rate))), n)
    if start_idx >= end_idx:
        raise InvalidRangeError(
            f"Invalid time range: start time is after end time ({start_s:.3f}s >= {end_s:.3f}s after clamping)"
        )
    return samples[start_idx:end_idx].copy()


def make_segment(buffer: np.ndarray, start_sample: int, end_sample: int, sample_rate: int) -> Optional[Segment]:
    """Build a segment over buffer[start:end], or None if the clamped slice is empty."""
    audio = extract_samples(buffer, start_sample, end_sample).astype(np.int16, copy=False)
    if audio.size == 0:
        return None
    audio.flags.writeable = False
    rate = float(sample_rate)
    return Segment(
        start_sample=int(start_sample),
        end_sample=int(end_sample),
        start_time_s=float(start_sample) / rate,
        end_time_s=float(end_sample) / rate,
        samples=audio,
        sample_rate=int(sample_rate),
        audio_base64=encode_wav_base64(audio, int(sample_rate)),
    )


def assemble_segments(
    labels: Iterable[ChunkLabel],
    buffer: np.ndarray,
    sample_rate: int,
    chunk_size: int,
) -> list[Segment]:
    """Collapse runs of speech-labelled chunks into segments.

    Chunk ``k`` starts at sample ``k * chunk_size``. A run closes at the start
    of the first non-speech chunk after it, or at the buffer end.
    """
    buffer = np.asarray(buffer).reshape(-1)
    segments: list[Segment] = []
    open_start: Optional[int] = None

    for chunk_index, chunk_label in enumerate(labels):
        chunk_start = chunk_index * int(chunk_size)
        if chunk_label.is_speech:
            if open_start is None:
                open_start = chunk_start
        elif open_start is not None:
            segment = make_segment(buffer, open_start, chunk_start, sample_rate)
            if segment is not None:
                segments.append(segment)
            open_start = None

    if open_start is not None:
        segment = make_segment(buffer, open_start, int(buffer.size), sample_rate)
        if segment is not None:
            segments.append(segment)

    return segments


def merge_segments(
    segments: Iterable[Segment],
    buffer: np.ndarray,
    max_gap_s: float = DEFAULT_MAX_GAP_SEC,
    *,
    progress: Optional[ProgressCallback] = None,
) -> list[Segment]:
    """Merge segments whose gap is at most ``max_gap_s`` seconds.

    The merged segment re-slices the buffer over the whole span, so the gap
    audio between the two runs is included.
    """
    ordered = sorted(segments, key=lambda s: s.start_time_s)
    if not ordered:
        return []

    buffer = np.asarray(buffer).reshape(-1)
    total = len(ordered)
    merged: list[Segment] = []
    current = ordered[0]

    for processed, nxt in enumerate(ordered[1:], start=1):
        if processed % 10 == 0 or processed == total - 1:
            report_progress(
                progress,
                "Merging segments",
                milestones.MERGE_START + (processed / total) * (milestones.MERGE_DONE - milestones.MERGE_START),
                f"Processed {processed}/{total} segments",
                lo=milestones.MERGE_START,
                hi=milestones.MERGE_DONE,
            )

        gap = nxt.start_time_s - current.end_time_s
        if gap <= float(max_gap_s):
            logger.debug(
                "Merging %.2fs-%.2fs with %.2fs-%.2fs (gap %.3fs)",
                current.start_time_s,
                current.end_time_s,
                nxt.start_time_s,
                nxt.end_time_s,
                gap,
            )
            combined = make_segment(buffer, current.start_sample, nxt.end_sample, current.sample_rate)
            if combined is not None:
                current = combined
                continue
            # The span lies outside this buffer; keep both segments as they are.
            logger.warning(
                "Cannot merge %.2fs-%.2fs: span is outside the %d-sample buffer",
                current.start_time_s,
                nxt.end_time_s,
                buffer.size,
            )
        merged.append(current)
        current = nxt

    merged.append(current)
    return merged
