"""AssemblyAI implementation of the TranscriptionService interface."""

import assemblyai as aai

from bridge_tester.common import setup_logging
from bridge_tester.transcriber.exceptions import TranscriptionError

from .interfaces import TranscriptionService

logger = setup_logging()

# AssemblyAI only distinguishes regional variants for English
_LANGUAGE_CODES = {
    "en-US": "en_us",
    "en-GB": "en_uk",
    "en-AU": "en_au",
}


def language_code(locale: str) -> str:
    """Maps a normalized locale to the AssemblyAI language code."""
    return _LANGUAGE_CODES.get(locale, locale.split("-")[0].lower())


class AssemblyAITranscriber(TranscriptionService):
    """Handles audio transcription using AssemblyAI."""

    def __init__(self, transcriber: aai.Transcriber):
        self._transcriber = transcriber

    def transcribe(self, audio_file: str, locale: str) -> str:
        config = aai.TranscriptionConfig(language_code=language_code(locale))
        try:
            transcription = self._transcriber.transcribe(audio_file, config=config)

            if transcription.status == aai.TranscriptStatus.error:
                raise TranscriptionError(audio_file, Exception(transcription.error))

            if transcription.text is None:
                raise TranscriptionError(
                    audio_file,
                    Exception("Transcription returned no text"),
                )

            logger.info(
                "Audio transcription successful",
                extra={"audio_file": audio_file, "locale": locale},
            )
            return transcription.text

        except TranscriptionError:
            raise
        except Exception as e:
            logger.exception("AssemblyAI transcription failed")
            raise TranscriptionError(audio_file, e) from e
