"""Capture peer: relays dial requests to a recorder and its events back."""

from bridge_tester.common import (
    CallState,
    CallStatus,
    DialRequest,
    MessageName,
    PeerRole,
    RecordingReady,
    setup_logging,
)
from bridge_tester.common.infrastructure import PeerBus
from bridge_tester.common.peer import PeerProcess

from .interfaces import CallRecorder

logger = setup_logging()


class CallEvents:
    """Reports the progress of one dialed call to the controller from any thread."""

    def __init__(self, bus: PeerBus, request: DialRequest):
        self._bus = bus
        self._request = request

    def status(self, state: CallState) -> None:
        message = CallStatus(state=state, cycle_id=self._request.cycle_id)
        self._bus.call_threadsafe(
            lambda: self._bus.emit(MessageName.CALL_STATUS, message)
        )

    def recording_ready(self, file: str | None = None) -> None:
        message = RecordingReady(
            bridge=self._request.number,
            file=file,
            cycle_id=self._request.cycle_id,
        )
        self._bus.call_threadsafe(
            lambda: self._bus.emit(MessageName.RECORDING_READY, message)
        )


class CaptureWorker(PeerProcess):
    """Serves dial requests from the controller with a ``CallRecorder``."""

    role = PeerRole.CAPTURE

    def __init__(self, bus_factory, recorder: CallRecorder, **kwargs):
        super().__init__(bus_factory, **kwargs)
        self._recorder = recorder

    def register_handlers(self, bus: PeerBus) -> None:
        bus.on_message(
            MessageName.DIAL_REQUEST,
            lambda request: self._on_dial_request(bus, request),
        )

    def _on_dial_request(self, bus: PeerBus, request: DialRequest) -> None:
        logger.info(
            "Dial requested",
            extra={
                "number": request.number,
                "locale": request.locale,
                "cycle_id": request.cycle_id,
            },
        )
        events = CallEvents(bus, request)
        try:
            self._recorder.start_call(request, events)
        except Exception:
            logger.exception("Error dialing number", extra={"number": request.number})
            bus.emit(
                MessageName.CALL_STATUS,
                CallStatus(state=CallState.FAILED, cycle_id=request.cycle_id),
            )
