"""Abstract interface for the call dialing and recording backend."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from bridge_tester.common import DialRequest

if TYPE_CHECKING:
    from bridge_tester.capture.worker import CallEvents


class CallRecorder(ABC):
    """Dials a bridge, records the far end and hangs up."""

    @abstractmethod
    def start_call(self, request: DialRequest, events: "CallEvents") -> None:
        """
        Dials ``request.number`` and records the call.

        Must return promptly. Progress is reported through ``events``, which
        may be called from any thread: ``status`` as the call is delivered,
        answered and recorded, then ``recording_ready`` once the recording
        is on disk, or ``status(CallState.FAILED)`` if the call fails.
        """
        pass
