from __future__ import annotations

from typing import Iterator, Tuple

import numpy as np


def estimate_num_chunks(num_samples: int, *, chunk_size: int) -> int:
    if num_samples <= 0 or chunk_size <= 0:
        return 0
    return -(-int(num_samples) // int(chunk_size))


def iter_chunks(audio: np.ndarray, *, chunk_size: int) -> Iterator[Tuple[int, np.ndarray]]:
    """Yield (start_sample, chunk) over non-overlapping chunks from sample 0.

    The final chunk may be shorter than chunk_size.
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    audio = np.asarray(audio).reshape(-1)
    for start in range(0, int(audio.size), int(chunk_size)):
        yield int(start), audio[start : start + chunk_size]


def pad_chunk(chunk: np.ndarray, chunk_size: int) -> np.ndarray:
    if chunk.size >= chunk_size:
        return chunk
    padded = np.zeros((chunk_size,), dtype=chunk.dtype)
    padded[: chunk.size] = chunk
    return padded
