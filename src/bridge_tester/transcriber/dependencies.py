"""Dependency injection configuration for the transcriber process."""

import assemblyai as aai

from bridge_tester.common import setup_logging
from bridge_tester.common.infrastructure import PeerBus, RabbitMQPeerBus
from bridge_tester.common.rabbitmq import get_rabbit_channel

from .config import load_config
from .handlers import TranscriptionRequestHandler
from .infrastructure import AssemblyAITranscriber
from .worker import TranscriberWorker

logger = setup_logging()

_config = load_config()

# AssemblyAI setup
aai.settings.api_key = _config.assemblyai.api_key
_transcription_service = AssemblyAITranscriber(aai.Transcriber())


def connect_bus() -> PeerBus:
    """Opens a fresh broker connection and returns a peer bus on it."""
    _connection, channel = get_rabbit_channel(_config.rabbitmq)
    bus = RabbitMQPeerBus(channel, _config.rabbitmq)
    bus.setup()
    return bus


def get_handler() -> TranscriptionRequestHandler:
    """Returns the configured transcription request handler."""
    return TranscriptionRequestHandler(_transcription_service)


def get_worker() -> TranscriberWorker:
    """Returns the configured worker."""
    return TranscriberWorker(
        connect_bus,
        get_handler(),
        reconnect_delay_s=_config.rabbitmq.reconnect_delay_s,
    )
