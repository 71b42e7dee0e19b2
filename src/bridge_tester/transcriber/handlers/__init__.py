"""Handler exports."""

from .transcription_request_handler import TranscriptionRequestHandler

__all__ = ["TranscriptionRequestHandler"]
