from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class ModelConfig:
    backend: str = "auto"  # auto | onnx | heuristic
    path: str = "models/silero_vad.onnx"


@dataclass(frozen=True)
class VadConfig:
    chunk_size: int = 512
    threshold: float = 0.5
    padding_chunks: int = 2
    rms_db_threshold: float = -45.0


@dataclass(frozen=True)
class SegmentConfig:
    max_gap_sec: float = 1.5


@dataclass(frozen=True)
class TranscriptionConfig:
    base_url: str = "https://api.litviva.com/v1"
    model: str = "hackathon/speech2text"
    api_key_env: str = "SPEECHCUT_API_KEY"
    timeout_sec: float = 60.0
    language: str = ""


@dataclass(frozen=True)
class StorageConfig:
    reports_dir: str = "reports"
    write_wavs: bool = False


@dataclass(frozen=True)
class AppConfig:
    sample_rate: int = 16000
    model: ModelConfig = ModelConfig()
    vad: VadConfig = VadConfig()
    segments: SegmentConfig = SegmentConfig()
    transcription: TranscriptionConfig = TranscriptionConfig()
    storage: StorageConfig = StorageConfig()


def _get(d: dict[str, Any], key: str, default: Any) -> Any:
    value = d.get(key, default)
    return default if value is None else value


def _section(raw: dict[str, Any], key: str) -> dict[str, Any]:
    value = raw.get(key, {}) or {}
    return value if isinstance(value, dict) else {}


def load_config(path: Path) -> AppConfig:
    path = Path(path)
    if not path.exists():
        return AppConfig()

    try:
        import yaml  # type: ignore
    except Exception as exc:  # pragma: no cover
        raise RuntimeError("PyYAML is required to read config.yaml") from exc

    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        return AppConfig()

    model_raw = _section(raw, "model")
    vad_raw = _section(raw, "vad")
    segments_raw = _section(raw, "segments")
    transcription_raw = _section(raw, "transcription")
    storage_raw = _section(raw, "storage")

    return AppConfig(
        sample_rate=int(_get(raw, "sample_rate", 16000)),
        model=ModelConfig(
            backend=str(_get(model_raw, "backend", "auto")),
            path=str(_get(model_raw, "path", "models/silero_vad.onnx")),
        ),
        vad=VadConfig(
            chunk_size=int(_get(vad_raw, "chunk_size", 512)),
            threshold=float(_get(vad_raw, "threshold", 0.5)),
            padding_chunks=int(_get(vad_raw, "padding_chunks", 2)),
            rms_db_threshold=float(_get(vad_raw, "rms_db_threshold", -45.0)),
        ),
        segments=SegmentConfig(
            max_gap_sec=float(_get(segments_raw, "max_gap_sec", 1.5)),
        ),
        transcription=TranscriptionConfig(
            base_url=str(_get(transcription_raw, "base_url", "https://api.litviva.com/v1")),
            model=str(_get(transcription_raw, "model", "hackathon/speech2text")),
            api_key_env=str(_get(transcription_raw, "api_key_env", "SPEECHCUT_API_KEY")),
            timeout_sec=float(_get(transcription_raw, "timeout_sec", 60.0)),
            language=str(_get(transcription_raw, "language", "")),
        ),
        storage=StorageConfig(
            reports_dir=str(_get(storage_raw, "reports_dir", "reports")),
            write_wavs=bool(_get(storage_raw, "write_wavs", False)),
        ),
    )
