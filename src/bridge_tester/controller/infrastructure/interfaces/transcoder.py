"""Abstract interface for recording transcoding."""

from abc import ABC, abstractmethod


class Transcoder(ABC):
    @abstractmethod
    def transcode(self, source: str, destination: str) -> str:
        """
        Converts a raw call recording into audio the transcriber accepts.

        Args:
            source: Path of the raw recording.
            destination: Path to write the converted audio to.

        Returns:
            The destination path.

        Raises:
            TranscodingError: If conversion fails.
        """
        pass
