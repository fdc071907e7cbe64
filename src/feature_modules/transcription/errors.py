"""Exceptions raised along the transcription path."""
from typing import Optional


class TranscriptionInputError(ValueError):
    """The caller sent neither a file nor a URL."""


class TranscriptionError(RuntimeError):
    """The provider returned nothing usable."""


class DeepgramError(TranscriptionError):
    """Deepgram answered with a non-2xx status or an unreadable body."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(message)
