"""Worker peer that serves transcription requests from the controller."""

from bridge_tester.common import (
    MessageName,
    PeerRole,
    TranscriptionRequest,
    TranscriptionResult,
    setup_logging,
)
from bridge_tester.common.infrastructure import PeerBus
from bridge_tester.common.peer import PeerProcess
from bridge_tester.transcriber.exceptions import TranscriptionError

from .handlers import TranscriptionRequestHandler

logger = setup_logging()


class TranscriberWorker(PeerProcess):
    """Consumes transcription requests and emits their results."""

    role = PeerRole.WORKER

    def __init__(self, bus_factory, handler: TranscriptionRequestHandler, **kwargs):
        super().__init__(bus_factory, **kwargs)
        self._handler = handler

    def register_handlers(self, bus: PeerBus) -> None:
        bus.on_message(
            MessageName.TRANSCRIPTION_REQUEST,
            lambda request: self._on_request(bus, request),
        )

    def _on_request(self, bus: PeerBus, request: TranscriptionRequest) -> None:
        """Callback for each transcription request; always answers with a result."""
        logger.info(
            "Transcription requested",
            extra={"audio_file": request.file, "cycle_id": request.cycle_id},
        )
        try:
            text = self._handler.process(request)
            result = TranscriptionResult(text=text, cycle_id=request.cycle_id)
        except TranscriptionError as e:
            logger.exception(
                "Transcription request failed", extra={"audio_file": request.file}
            )
            result = TranscriptionResult(error=str(e), cycle_id=request.cycle_id)

        bus.emit(MessageName.TRANSCRIPTION_RESULT, result)
