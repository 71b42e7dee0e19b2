"""moviepy implementation of the Transcoder interface."""

import os

import moviepy

from bridge_tester.common import setup_logging
from bridge_tester.controller.exceptions import TranscodingError

from .interfaces import Transcoder

logger = setup_logging()


class MoviepyTranscoder(Transcoder):
    """Converts call recordings to 16 kHz mono 16-bit PCM WAV."""

    def __init__(self, sample_rate_hz: int = 16000):
        self._sample_rate_hz = sample_rate_hz

    def transcode(self, source: str, destination: str) -> str:
        if not source or not destination:
            raise TranscodingError(
                source or "", Exception("both input and output paths are required")
            )
        if not os.path.exists(source):
            raise TranscodingError(source, FileNotFoundError(source))

        os.makedirs(os.path.dirname(destination) or ".", exist_ok=True)
        try:
            clip = moviepy.AudioFileClip(source)
            try:
                clip.write_audiofile(
                    destination,
                    fps=self._sample_rate_hz,
                    nbytes=2,
                    codec="pcm_s16le",
                    ffmpeg_params=["-ac", "1", "-map_metadata", "-1"],
                    logger=None,
                )
            finally:
                clip.close()
        except Exception as e:
            logger.exception(
                "Transcoding failed",
                extra={"source": source, "destination": destination},
            )
            raise TranscodingError(source, e) from e

        logger.info(
            "Recording transcoded",
            extra={"source": source, "destination": destination},
        )
        return destination
