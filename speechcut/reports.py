from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Optional

from speechcut.audio.wav import encode_wav
from speechcut.types import Segment


def _dt_slug() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%SZ")


def segment_to_dict(segment: Segment, *, include_audio: bool = False) -> dict[str, Any]:
    d: dict[str, Any] = {
        "start_sample": int(segment.start_sample),
        "end_sample": int(segment.end_sample),
        "start_time_seconds": float(segment.start_time_s),
        "end_time_seconds": float(segment.end_time_s),
        "duration_seconds": float(segment.duration_s),
        "num_samples": int(segment.num_samples),
    }
    if include_audio:
        d["audio_base64"] = segment.audio_base64
    return d


def build_report(
    segments: Iterable[Segment],
    *,
    source: str,
    sample_rate: int,
    backend: str = "",
    backend_note: str = "",
    transcripts: Optional[list[str]] = None,
    include_audio: bool = False,
) -> dict[str, Any]:
    items = [segment_to_dict(s, include_audio=include_audio) for s in segments]
    if transcripts is not None:
        for item, text in zip(items, transcripts):
            item["text"] = text
    return {
        "source": str(source),
        "created_at": datetime.now(timezone.utc).isoformat(),
        "sample_rate": int(sample_rate),
        "backend": str(backend),
        "backend_note": str(backend_note),
        "segment_count": len(items),
        "speech_seconds": float(sum(item["duration_seconds"] for item in items)),
        "segments": items,
    }


def ensure_reports_dir(*, base_dir: Optional[Path], reports_dir: str) -> Path:
    root = Path(base_dir) if base_dir is not None else Path(__file__).resolve().parents[1]
    out = (root / reports_dir).resolve()
    out.mkdir(parents=True, exist_ok=True)
    return out


def default_report_stem(*, prefix: str = "speechcut") -> str:
    return f"{prefix}_{_dt_slug()}"


def write_json_report(report: dict[str, Any], path: Path) -> None:
    path = Path(path)
    path.write_text(json.dumps(report, ensure_ascii=False, indent=2), encoding="utf-8")


def write_segment_wavs(segments: Iterable[Segment], out_dir: Path, *, stem: str) -> list[Path]:
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for idx, segment in enumerate(segments):
        path = out_dir / f"{stem}_segment_{idx:03d}.wav"
        path.write_bytes(encode_wav(segment.samples, segment.sample_rate))
        written.append(path)
    return written
