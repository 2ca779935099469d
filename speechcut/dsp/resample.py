from __future__ import annotations

import numpy as np


def resample_audio(audio: np.ndarray, orig_sr: int, target_sr: int) -> np.ndarray:
    """Linear-interpolation resampler for int16 mono audio.

    No anti-aliasing filter is applied. Good enough for voice activity
    detection, not for archival quality. Integer input of a wider dtype is
    accepted only when every value fits in int16.
    """
    audio = np.asarray(audio).reshape(-1)
    if audio.dtype != np.int16:
        if not np.issubdtype(audio.dtype, np.integer):
            raise ValueError(f"Expected integer PCM samples, got dtype={audio.dtype}")
        if audio.size and (int(audio.min()) < -32768 or int(audio.max()) > 32767):
            raise ValueError(f"Sample values out of 16-bit range: [{int(audio.min())}, {int(audio.max())}]")
        audio = audio.astype(np.int16)
    orig_sr_i = int(orig_sr)
    target_sr_i = int(target_sr)
    if orig_sr_i <= 0 or target_sr_i <= 0:
        raise ValueError(f"Sample rates must be positive, got {orig_sr_i} -> {target_sr_i}")
    if orig_sr_i == target_sr_i:
        return audio.copy()

    n = int(audio.size)
    if n == 0:
        return np.zeros((0,), dtype=np.int16)

    ratio = float(orig_sr_i) / float(target_sr_i)
    out_len = int(float(n) / ratio)

    src_pos = np.arange(out_len, dtype=np.float64) * ratio
    src_idx = np.floor(src_pos).astype(np.int64)
    # Positions are increasing, so the first out-of-range index ends the output.
    valid = int(np.searchsorted(src_idx, n, side="left"))
    src_pos = src_pos[:valid]
    src_idx = src_idx[:valid]

    nxt_idx = np.minimum(src_idx + 1, n - 1)
    frac = src_pos - src_idx
    s1 = audio[src_idx].astype(np.float64)
    s2 = audio[nxt_idx].astype(np.float64)
    out = s1 + (s2 - s1) * frac

    # Casting truncates toward zero; the last sample has s2 == s1 and passes through.
    return out.astype(np.int16)
