from __future__ import annotations

import logging
from pathlib import Path
from typing import Tuple

import numpy as np

from speechcut.errors import DecodeError, UnsupportedFormatError
from speechcut.preprocess import to_mono

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = ("wav", "mp3", "m4a", "aac", "flac", "ogg")


def check_supported_format(path: Path) -> str:
    ext = Path(path).suffix.lstrip(".").lower()
    if ext not in SUPPORTED_EXTENSIONS:
        supported = ", ".join(e.upper() for e in SUPPORTED_EXTENSIONS)
        raise UnsupportedFormatError(f"Unsupported audio format: '{ext}'. Supported formats: {supported}")
    return ext


def _read_soundfile(path: Path) -> Tuple[np.ndarray, int]:
    import soundfile as sf  # type: ignore

    audio, sr = sf.read(path, always_2d=True, dtype="int16")
    return audio, int(sr)


def _read_pydub(path: Path) -> Tuple[np.ndarray, int]:
    try:
        from pydub import AudioSegment  # type: ignore
    except Exception as exc:  # pragma: no cover
        raise DecodeError("Failed to decode audio. For MP3/M4A/AAC, install ffmpeg and `pydub`.") from exc

    try:
        seg = AudioSegment.from_file(path)
    except Exception as exc:
        raise DecodeError(f"Failed to decode audio file {path}: {exc}") from exc

    if seg.sample_width != 2:
        seg = seg.set_sample_width(2)
    samples = np.array(seg.get_array_of_samples(), dtype=np.int16)
    channels = max(1, int(seg.channels))
    frames = samples.size // channels
    return samples[: frames * channels].reshape((frames, channels)), int(seg.frame_rate)


def load_audio_file(path: Path) -> Tuple[np.ndarray, int]:
    """Decode an audio file into (int16 mono samples, sample rate)."""
    path = Path(path)
    if not path.exists():
        raise DecodeError(f"File not found: {path}")

    try:
        audio, sr = _read_soundfile(path)
    except Exception as exc:
        logger.debug("soundfile could not read %s (%s), trying pydub", path, exc)
        audio, sr = _read_pydub(path)

    mono = to_mono(audio)
    if mono.size == 0:
        raise DecodeError("Audio file is empty or contains no valid samples.")

    logger.info("Decoded %s: %d samples at %d Hz (%d channel(s))", path.name, mono.size, sr, audio.shape[1])
    return mono, sr
