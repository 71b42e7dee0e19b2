from .call_recorder import CallRecorder

__all__ = ["CallRecorder"]
