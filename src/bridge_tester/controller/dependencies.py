"""Dependency injection configuration for the controller process."""

import requests

from bridge_tester.common import setup_logging
from bridge_tester.common.infrastructure import RabbitMQControllerBus
from bridge_tester.common.rabbitmq import get_rabbit_channel

from .config import load_config
from .domain import (
    BridgeTestConfiguration,
    ConfigurationStore,
    LocaleRegistry,
    Mode,
    Repeat,
    Scorer,
)
from .handlers import BridgeTestScheduler, CallOrchestrator, CommandHandler
from .infrastructure import CircuitRestClient, MoviepyTranscoder, PikaTimerService
from .logon import LogonLoop
from .reporting import ConversationReporter
from .worker import Controller

logger = setup_logging()

_config = load_config()

# RabbitMQ bus and the timers of its event loop
_rabbit_connection, _rabbit_channel = get_rabbit_channel(_config.rabbitmq)
_bus = RabbitMQControllerBus(_rabbit_channel, _config.rabbitmq)
_bus.setup()
_timers = PikaTimerService(_rabbit_connection)

# Circuit conversation
_client = CircuitRestClient(
    requests.Session(),
    domain=_config.circuit.domain,
    client_id=_config.circuit.client_id,
    client_secret=_config.circuit.client_secret,
    timeout_s=_config.circuit.request_timeout_s,
)
_reporter = ConversationReporter(_client, _config.circuit.conversation_id)

# Test configuration and scoring
_registry = LocaleRegistry()
_store = ConfigurationStore(
    _registry,
    BridgeTestConfiguration(
        mode=Mode(_config.defaults.mode),
        repeat=Repeat(_config.defaults.repeat),
        interval_ms=_config.defaults.interval_ms,
    ),
)
_scorer = Scorer(_registry)

# Test pipeline
_orchestrator = CallOrchestrator(
    _bus,
    MoviepyTranscoder(),
    _scorer,
    _reporter,
    _timers,
    recording_file=_config.media.recording_file,
    transcoded_file=_config.media.transcoded_file,
    dial_timeout_s=_config.timing.dial_timeout_s,
    recording_timeout_s=_config.timing.recording_timeout_s,
    transcription_timeout_s=_config.timing.transcription_timeout_s,
)
_scheduler = BridgeTestScheduler(_store, _orchestrator, _timers, _reporter)
_logon = LogonLoop(
    _client,
    _timers,
    on_connected=lambda user: _reporter.say_hi(_config.circuit.nick_name),
    retry_s=_config.timing.logon_retry_s,
    settle_s=_config.timing.logon_settle_s,
)
_commands = CommandHandler(
    _store, _scheduler, _orchestrator, _reporter, _client, _logon, _registry
)


def get_controller() -> Controller:
    """Returns the configured controller."""
    return Controller(_bus, _logon, _orchestrator, _commands)
