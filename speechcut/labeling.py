"""Per-chunk speech/non-speech labelling.

The segmenter only depends on :class:`SpeechClassifier`. Concrete models plug
in as a :class:`ChunkScorer` behind :class:`ScoredLabeler`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import deque
from typing import Iterator

import numpy as np

from speechcut.errors import ClassifierError
from speechcut.types import ChunkLabel, Label
from speechcut.windowing import iter_chunks, pad_chunk


class SpeechClassifier(ABC):
    @abstractmethod
    def label_stream(
        self,
        samples: np.ndarray,
        *,
        chunk_size: int,
        threshold: float,
        padding_chunks: int,
    ) -> Iterator[ChunkLabel]:
        """Yield one label per chunk, left to right, starting at sample 0."""


class ChunkScorer(ABC):
    @abstractmethod
    def predict(self, chunk: np.ndarray) -> float:
        """Speech probability in [0, 1] for one full-size int16 chunk."""

    def reset(self) -> None:
        pass


class ScoredLabeler(SpeechClassifier):
    def __init__(self, scorer: ChunkScorer, *, backend: str = "", backend_note: str = "") -> None:
        self._scorer = scorer
        self._backend = str(backend)
        self._backend_note = str(backend_note)

    @property
    def scorer(self) -> ChunkScorer:
        return self._scorer

    @property
    def backend(self) -> str:
        return self._backend

    @property
    def backend_note(self) -> str:
        return self._backend_note

    def label_stream(
        self,
        samples: np.ndarray,
        *,
        chunk_size: int,
        threshold: float,
        padding_chunks: int,
    ) -> Iterator[ChunkLabel]:
        self._scorer.reset()
        padding = max(0, int(padding_chunks))

        # Non-speech chunks held back in case speech follows within the padding window.
        pending: deque[np.ndarray] = deque()
        hangover = 0

        for start, chunk in iter_chunks(samples, chunk_size=chunk_size):
            try:
                p = float(self._scorer.predict(pad_chunk(chunk, chunk_size)))
            except Exception as exc:
                raise ClassifierError(f"Speech classifier failed at sample {start}: {exc}") from exc
            if p > float(threshold):
                while pending:
                    yield ChunkLabel(Label.SPEECH, pending.popleft())
                hangover = padding
                yield ChunkLabel(Label.SPEECH, chunk)
            elif hangover > 0:
                hangover -= 1
                yield ChunkLabel(Label.SPEECH, chunk)
            else:
                pending.append(chunk)
                if len(pending) > padding:
                    yield ChunkLabel(Label.NON_SPEECH, pending.popleft())

        while pending:
            yield ChunkLabel(Label.NON_SPEECH, pending.popleft())
