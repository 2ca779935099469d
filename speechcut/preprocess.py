from __future__ import annotations

import numpy as np

from speechcut.dsp.resample import resample_audio


def to_mono(audio: np.ndarray) -> np.ndarray:
    """Mix (frames, channels) integer audio down to int16 mono.

    Channels are averaged and the mean is truncated toward zero.
    """
    audio = np.asarray(audio)
    if audio.ndim == 1:
        return audio.astype(np.int16, copy=False)
    if audio.ndim != 2:
        raise ValueError(f"Expected 1D/2D audio array, got shape={audio.shape}")
    channels = int(audio.shape[1])
    if channels == 1:
        return audio[:, 0].astype(np.int16)
    sums = audio.astype(np.int64).sum(axis=1)
    return np.trunc(sums / channels).astype(np.int16)


def preprocess_audio(audio: np.ndarray, orig_sr: int, target_sr: int) -> np.ndarray:
    audio_mono = to_mono(audio)
    return resample_audio(audio_mono, orig_sr=orig_sr, target_sr=target_sr)
