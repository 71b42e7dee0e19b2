"""Infrastructure layer exports."""

from .interfaces import MessageBus, MessageHandler, PeerBus, PeerHandle
from .rabbitmq_bus import RabbitMQBus, RabbitMQControllerBus, RabbitMQPeerBus

__all__ = [
    "MessageBus",
    "MessageHandler",
    "PeerBus",
    "PeerHandle",
    "RabbitMQBus",
    "RabbitMQControllerBus",
    "RabbitMQPeerBus",
]
