from __future__ import annotations


class SpeechcutError(Exception):
    """Base class for errors raised by speechcut."""


class UnsupportedFormatError(SpeechcutError):
    pass


class DecodeError(SpeechcutError):
    pass


class ClassifierError(SpeechcutError):
    pass


class EncodingError(SpeechcutError):
    pass


class InvalidRangeError(SpeechcutError):
    pass


class TranscriptionError(SpeechcutError):
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
