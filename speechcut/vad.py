from __future__ import annotations

import numpy as np


def to_float(audio: np.ndarray) -> np.ndarray:
    """int16 PCM -> float32 in [-1, 1)."""
    audio = np.asarray(audio)
    if np.issubdtype(audio.dtype, np.integer):
        return audio.astype(np.float32) / 32768.0
    return audio.astype(np.float32, copy=False)


def rms_db(audio: np.ndarray, eps: float = 1e-12) -> float:
    audio = to_float(audio)
    if audio.size == 0:
        return float("-inf")
    rms = float(np.sqrt(np.mean(np.square(audio))))
    return 20.0 * float(np.log10(rms + eps))
