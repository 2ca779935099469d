from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from speechcut.config import AppConfig
from speechcut.errors import ClassifierError
from speechcut.inference import EnergyScorer, SileroOnnxScorer
from speechcut.labeling import ChunkScorer, ScoredLabeler

logger = logging.getLogger(__name__)

BACKENDS = ("auto", "onnx", "heuristic")


def _default_base_dir() -> Path:
    return Path(__file__).resolve().parents[1]


def validate_vad_config(config: AppConfig) -> None:
    vad = config.vad
    if int(vad.chunk_size) <= 0:
        raise ClassifierError(f"vad.chunk_size must be positive, got {vad.chunk_size}")
    if not 0.0 <= float(vad.threshold) <= 1.0:
        raise ClassifierError(f"vad.threshold must be within [0, 1], got {vad.threshold}")
    if int(vad.padding_chunks) < 0:
        raise ClassifierError(f"vad.padding_chunks must be >= 0, got {vad.padding_chunks}")


def build_classifier(config: AppConfig, *, base_dir: Optional[Path] = None) -> ScoredLabeler:
    """Create the chunk classifier requested by ``config.model.backend``.

    ``auto`` prefers the Silero ONNX model and quietly falls back to the energy
    heuristic; an explicit ``onnx`` request that cannot be honoured is fatal.
    """
    validate_vad_config(config)

    requested = str(config.model.backend).lower()
    if requested not in BACKENDS:
        raise ClassifierError(f"Unknown model.backend '{requested}'. Expected one of: {', '.join(BACKENDS)}")

    root = Path(base_dir) if base_dir is not None else _default_base_dir()
    scorer: Optional[ChunkScorer] = None
    backend = "heuristic"
    note = ""

    if requested in {"onnx", "auto"}:
        model_path = (root / str(config.model.path)).resolve()
        if model_path.exists():
            try:
                scorer = SileroOnnxScorer(
                    model_path, sample_rate=int(config.sample_rate), chunk_size=int(config.vad.chunk_size)
                )
                backend = "onnx"
            except Exception as exc:
                if requested == "onnx":
                    raise ClassifierError(f"Failed to create VAD: {exc}") from exc
                note = f"ONNX backend unavailable: {exc}"
        elif requested == "onnx":
            raise ClassifierError(f"ONNX model not found: {model_path}")
        else:
            note = (
                f"Silero VAD model not found at {model_path}; using energy heuristic. "
                "Run scripts/download_vad_model.py to fetch it."
            )

    if scorer is None:
        scorer = EnergyScorer(threshold_db=float(config.vad.rms_db_threshold))

    if note:
        logger.warning(note)
    logger.info("Voice activity backend: %s", backend)
    return ScoredLabeler(scorer, backend=backend, backend_note=note)
