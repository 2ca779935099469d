from __future__ import annotations

import logging
import os
from typing import Optional

import httpx

from speechcut.audio.wav import decode_wav_base64
from speechcut.config import TranscriptionConfig
from speechcut.errors import EncodingError, TranscriptionError
from speechcut.types import Segment

logger = logging.getLogger(__name__)


class TranscriptionClient:
    """Upload WAV segments to an OpenAI-compatible /audio/transcriptions endpoint."""

    def __init__(
        self,
        config: TranscriptionConfig,
        *,
        api_key: Optional[str] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._config = config
        self._api_key = api_key if api_key is not None else os.getenv(config.api_key_env, "")
        self._client = client or httpx.Client(timeout=float(config.timeout_sec))

    def __enter__(self) -> "TranscriptionClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _url(self) -> str:
        base = str(self._config.base_url).rstrip("/")
        if not base:
            raise TranscriptionError("Transcription base URL missing")
        return f"{base}/audio/transcriptions"

    def _headers(self) -> dict[str, str]:
        if not self._api_key:
            raise TranscriptionError(f"API key missing: set {self._config.api_key_env}")
        return {"Authorization": f"Bearer {self._api_key}"}

    def transcribe_wav(self, wav_bytes: bytes, segment_index: int = 0) -> str:
        url = self._url()
        headers = self._headers()
        files = {"file": (f"segment_{segment_index}.wav", wav_bytes, "audio/wav")}
        data = {"model": self._config.model}
        if self._config.language:
            data["language"] = self._config.language

        try:
            resp = self._client.post(url, headers=headers, files=files, data=data)
        except httpx.HTTPError as exc:
            raise TranscriptionError(f"Failed to send request: {exc}") from exc

        if not resp.is_success:
            body = resp.text or "Unknown error"
            raise TranscriptionError(f"API error {resp.status_code}: {body}", status_code=resp.status_code)

        try:
            payload = resp.json()
        except ValueError as exc:
            raise TranscriptionError(f"Failed to parse response: {exc}") from exc

        text = payload.get("text") if isinstance(payload, dict) else None
        logger.debug("Segment %d transcribed (%d chars)", segment_index, len(text or ""))
        return text if isinstance(text, str) else ""

    def transcribe_segment(self, segment: Segment, segment_index: int = 0) -> str:
        if not segment.audio_base64:
            raise TranscriptionError(f"Segment {segment_index} has no encoded audio")
        try:
            wav_bytes = decode_wav_base64(segment.audio_base64)
        except EncodingError as exc:
            raise TranscriptionError(f"Failed to decode base64: {exc}") from exc
        return self.transcribe_wav(wav_bytes, segment_index)

    def close(self) -> None:
        self._client.close()
