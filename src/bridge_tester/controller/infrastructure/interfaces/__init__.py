"""Infrastructure interface exports."""

from .conversation_client import ConversationClient
from .timer_service import TimerService
from .transcoder import Transcoder

__all__ = ["ConversationClient", "TimerService", "Transcoder"]
