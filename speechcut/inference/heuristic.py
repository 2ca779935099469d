from __future__ import annotations

import math

import numpy as np

from speechcut.labeling import ChunkScorer
from speechcut.vad import rms_db


def _sigmoid(x: float) -> float:
    if x < -60.0:
        return 0.0
    return float(1.0 / (1.0 + math.exp(-x)))


class EnergyScorer(ChunkScorer):
    """Loudness-only speech score.

    Maps chunk RMS (dBFS) through a logistic curve centred on
    ``threshold_db``, so a probability of 0.5 sits exactly on the threshold.
    Demo quality: any loud noise counts as speech.
    """

    def __init__(self, *, threshold_db: float = -45.0, slope_db: float = 3.0) -> None:
        if slope_db <= 0:
            raise ValueError("slope_db must be positive")
        self._threshold_db = float(threshold_db)
        self._slope_db = float(slope_db)

    @property
    def threshold_db(self) -> float:
        return self._threshold_db

    def predict(self, chunk: np.ndarray) -> float:
        level = rms_db(chunk)
        if math.isinf(level):
            return 0.0
        return _sigmoid((level - self._threshold_db) / self._slope_db)
