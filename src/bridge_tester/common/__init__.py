from bridge_tester.common.config import RabbitMQConfig
from bridge_tester.common.exceptions import EventPublishError, PeerNotConnected
from bridge_tester.common.logging import setup_logging
from bridge_tester.common.messages import (
    CallState,
    CallStatus,
    DialRequest,
    MessageName,
    OperatorCommand,
    PeerDiscovery,
    PeerReady,
    PeerRole,
    RecordingReady,
    TranscriptionRequest,
    TranscriptionResult,
)

__all__ = [
    "setup_logging",
    "EventPublishError",
    "PeerNotConnected",
    "RabbitMQConfig",
    "CallState",
    "CallStatus",
    "DialRequest",
    "MessageName",
    "OperatorCommand",
    "PeerDiscovery",
    "PeerReady",
    "PeerRole",
    "RecordingReady",
    "TranscriptionRequest",
    "TranscriptionResult",
]
