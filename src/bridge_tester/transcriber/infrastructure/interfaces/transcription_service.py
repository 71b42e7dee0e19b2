"""Abstract interface for transcription service operations."""

from abc import ABC, abstractmethod


class TranscriptionService(ABC):
    """Abstract base class for speech-to-text backends."""

    @abstractmethod
    def transcribe(self, audio_file: str, locale: str) -> str:
        """
        Transcribes a local audio file.

        Args:
            audio_file: Path of the audio file.
            locale: Normalized locale of the speech, e.g. ``en-US``.

        Returns:
            The transcript text.

        Raises:
            TranscriptionError: If transcription fails.
        """
        pass
