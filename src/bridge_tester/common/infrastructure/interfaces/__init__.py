"""Infrastructure interface exports."""

from .message_bus import MessageBus, MessageHandler, PeerBus, PeerHandle

__all__ = ["MessageBus", "MessageHandler", "PeerBus", "PeerHandle"]
