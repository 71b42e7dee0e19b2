"""Bus-facing half of the media capture process."""

from .interfaces import CallRecorder
from .worker import CallEvents, CaptureWorker

__all__ = ["CallEvents", "CallRecorder", "CaptureWorker"]
