from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

import numpy as np


class Label(Enum):
    SPEECH = "speech"
    NON_SPEECH = "non_speech"


@dataclass(frozen=True)
class ChunkLabel:
    label: Label
    samples: np.ndarray  # int16 mono, one classifier chunk

    @property
    def is_speech(self) -> bool:
        return self.label is Label.SPEECH


@dataclass(frozen=True)
class Segment:
    start_sample: int
    end_sample: int
    start_time_s: float
    end_time_s: float
    samples: np.ndarray  # private read-only copy, int16 mono
    sample_rate: int
    audio_base64: str  # canonical WAV container, "" if encoding failed

    @property
    def duration_s(self) -> float:
        return float(self.end_time_s - self.start_time_s)

    @property
    def num_samples(self) -> int:
        return int(self.samples.size)


# (step, percent 0..100, details)
ProgressCallback = Callable[[str, float, Optional[str]], None]
