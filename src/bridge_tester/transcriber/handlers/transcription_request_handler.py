"""Handler for transcription requests."""

import os

from bridge_tester.common import TranscriptionRequest, setup_logging
from bridge_tester.transcriber.exceptions import TranscriptionError
from bridge_tester.transcriber.infrastructure.interfaces import TranscriptionService

logger = setup_logging()


class TranscriptionRequestHandler:
    """Transcribes the audio file named in a request."""

    def __init__(self, transcription_service: TranscriptionService):
        self._transcription_service = transcription_service

    def process(self, request: TranscriptionRequest) -> str:
        """
        Transcribes the requested file in the requested locale.

        Args:
            request: The file path and locale to transcribe.

        Returns:
            The transcript text.

        Raises:
            TranscriptionError: If the file is missing or transcription fails.
        """
        logger.info(
            "Processing audio",
            extra={"audio_file": request.file, "locale": request.locale},
        )
        if not os.path.isfile(request.file):
            raise TranscriptionError(request.file, FileNotFoundError(request.file))

        text = self._transcription_service.transcribe(request.file, request.locale)

        logger.info(
            "Audio processed",
            extra={"audio_file": request.file, "characters": len(text)},
        )
        return text
