"""Infrastructure layer exports."""

from .circuit_client import CircuitRestClient
from .moviepy_transcoder import MoviepyTranscoder
from .pika_timer_service import PikaTimerService

__all__ = ["CircuitRestClient", "MoviepyTranscoder", "PikaTimerService"]
