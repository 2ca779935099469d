from __future__ import annotations

import base64
import binascii
import logging
import struct
from dataclasses import dataclass

import numpy as np

from speechcut.errors import EncodingError

logger = logging.getLogger(__name__)

# RIFF header, "fmt " sub-block (PCM, 16 bytes), "data" sub-block header.
_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")
HEADER_SIZE = _HEADER.size  # 44

_UINT32_MAX = 0xFFFFFFFF
_INT16_MIN = -32768
_INT16_MAX = 32767


@dataclass(frozen=True)
class WavHeader:
    sample_rate: int
    channels: int
    bits_per_sample: int
    byte_rate: int
    block_align: int
    data_size: int

    @property
    def num_samples(self) -> int:
        return self.data_size // max(1, self.block_align)


def _as_pcm16(samples: np.ndarray) -> np.ndarray:
    data = np.asarray(samples)
    if data.ndim != 1:
        raise EncodingError(f"Expected 1D mono samples, got shape={data.shape}")
    if data.size == 0:
        return np.zeros((0,), dtype="<i2")
    if data.dtype != np.int16:
        if not np.issubdtype(data.dtype, np.integer):
            raise EncodingError(f"Expected integer PCM samples, got dtype={data.dtype}")
        lo, hi = int(data.min()), int(data.max())
        if lo < _INT16_MIN or hi > _INT16_MAX:
            raise EncodingError(f"Sample values out of 16-bit range: [{lo}, {hi}]")
    return data.astype("<i2", copy=False)


def encode_wav(samples: np.ndarray, sample_rate: int) -> bytes:
    """Encode mono int16 samples as a canonical 44-byte-header PCM WAV."""
    pcm = _as_pcm16(samples)
    rate = int(sample_rate)
    byte_rate = rate * 2
    if rate <= 0 or byte_rate > _UINT32_MAX:
        raise EncodingError(f"Unsupported sample rate for WAV: {rate}")

    data_size = int(pcm.size) * 2
    if 36 + data_size > _UINT32_MAX:
        raise EncodingError(f"Audio too long for WAV container: {pcm.size} samples")

    header = _HEADER.pack(
        b"RIFF",
        36 + data_size,
        b"WAVE",
        b"fmt ",
        16,  # fmt chunk size
        1,  # PCM
        1,  # mono
        rate,
        byte_rate,
        2,  # block align
        16,  # bits per sample
        b"data",
        data_size,
    )
    return header + pcm.tobytes()


def encode_wav_base64(samples: np.ndarray, sample_rate: int) -> str:
    """Base64 form of encode_wav; returns "" when encoding fails."""
    try:
        wav = encode_wav(samples, sample_rate)
    except EncodingError as exc:
        logger.warning("WAV encoding failed, leaving container empty: %s", exc)
        return ""
    return base64.b64encode(wav).decode("ascii")


def decode_wav_base64(text: str) -> bytes:
    try:
        return base64.b64decode(text.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise EncodingError(f"Invalid base64 WAV payload: {exc}") from exc


def read_wav_header(data: bytes) -> WavHeader:
    if len(data) < HEADER_SIZE:
        raise EncodingError(f"WAV data too short: {len(data)} bytes")
    (
        riff,
        _riff_size,
        wave,
        fmt,
        fmt_size,
        audio_format,
        channels,
        sample_rate,
        byte_rate,
        block_align,
        bits_per_sample,
        data_tag,
        data_size,
    ) = _HEADER.unpack_from(data, 0)
    if riff != b"RIFF" or wave != b"WAVE" or fmt != b"fmt " or data_tag != b"data":
        raise EncodingError("Not a canonical RIFF/WAVE container")
    if fmt_size != 16 or audio_format != 1:
        raise EncodingError(f"Unsupported WAV format: fmt_size={fmt_size}, format={audio_format}")
    return WavHeader(
        sample_rate=int(sample_rate),
        channels=int(channels),
        bits_per_sample=int(bits_per_sample),
        byte_rate=int(byte_rate),
        block_align=int(block_align),
        data_size=int(data_size),
    )
