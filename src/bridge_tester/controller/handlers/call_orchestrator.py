"""State machine driving one test call from dial to score."""

from collections.abc import Callable
from typing import Any

from bridge_tester.common import (
    CallState,
    CallStatus,
    DialRequest,
    EventPublishError,
    MessageName,
    PeerNotConnected,
    PeerRole,
    RecordingReady,
    TranscriptionRequest,
    TranscriptionResult,
    setup_logging,
)
from bridge_tester.common.infrastructure import MessageBus
from bridge_tester.controller.domain import (
    Bridge,
    CallSession,
    CycleOutcome,
    CycleState,
    Scorer,
)
from bridge_tester.controller.exceptions import (
    CallTimedOut,
    CycleInProgress,
    TranscodingError,
    UnsupportedLocale,
    WorkerNotReady,
)
from bridge_tester.controller.infrastructure.interfaces import TimerService, Transcoder
from bridge_tester.controller.reporting import ConversationReporter

logger = setup_logging()

CycleCallback = Callable[[CycleOutcome], None]

_CONNECTED_STATES = (CallState.DELIVERED, CallState.ACTIVE)
_AWAITING_RECORDING = (CycleState.DIALING, CycleState.CONNECTED_CALL, CycleState.RECORDING)


class CallOrchestrator:
    """
    Runs at most one test cycle at a time.

    A cycle dials through the capture peer, transcodes the recording it
    reports, has the worker peer transcribe it and scores the transcript.
    Every cycle ends in REPORTED, FAILED or TIMED_OUT and the outcome is
    handed to the callback given to ``run_cycle``.

    Messages carrying a ``cycle_id`` that is not the current cycle's are
    stale and ignored. A timeout of 0 lets the matching state wait forever.
    """

    def __init__(
        self,
        bus: MessageBus,
        transcoder: Transcoder,
        scorer: Scorer,
        reporter: ConversationReporter,
        timers: TimerService,
        recording_file: str,
        transcoded_file: str,
        dial_timeout_s: float = 0,
        recording_timeout_s: float = 0,
        transcription_timeout_s: float = 0,
    ):
        self._bus = bus
        self._transcoder = transcoder
        self._scorer = scorer
        self._reporter = reporter
        self._timers = timers
        self._recording_file = recording_file
        self._transcoded_file = transcoded_file
        self._timeouts = {
            CycleState.DIALING: dial_timeout_s,
            CycleState.CONNECTED_CALL: recording_timeout_s,
            CycleState.RECORDING: recording_timeout_s,
            CycleState.AWAITING_TRANSCRIPTION: transcription_timeout_s,
        }
        self._state = CycleState.IDLE
        self._session: CallSession | None = None
        self._on_complete: CycleCallback | None = None
        self._state_timer: Any = None
        self.last_outcome: CycleOutcome | None = None

    @property
    def state(self) -> CycleState:
        return self._state

    @property
    def session(self) -> CallSession | None:
        return self._session

    @property
    def busy(self) -> bool:
        return self._session is not None

    def register(self, bus: MessageBus) -> None:
        """Subscribes to the peer notifications that advance a cycle."""
        bus.on_message(MessageName.CALL_STATUS, self.on_call_status)
        bus.on_message(MessageName.RECORDING_READY, self.on_recording_ready)
        bus.on_message(MessageName.TRANSCRIPTION_RESULT, self.on_transcription_result)

    def run_cycle(
        self,
        bridge: Bridge,
        item_id: str | None = None,
        on_complete: CycleCallback | None = None,
    ) -> CallSession:
        """
        Starts a test cycle against ``bridge``.

        Failures after the cycle has started are reported and end the cycle;
        they do not raise.

        Raises:
            CycleInProgress: If another cycle has not reached a terminal state.
        """
        if self._session is not None:
            raise CycleInProgress(self._session.bridge.number)

        session = CallSession(bridge=bridge, conversation_item_id=item_id)
        self._session = session
        self._on_complete = on_complete
        self._transition(CycleState.DIALING)
        logger.info(
            "Dialing bridge",
            extra={
                "cycle_id": session.cycle_id,
                "number": bridge.number,
                "locale": bridge.locale,
            },
        )

        request = DialRequest(
            number=bridge.number,
            pin=bridge.pin,
            locale=bridge.locale,
            cycle_id=session.cycle_id,
        )
        try:
            self._bus.send(PeerRole.CAPTURE, MessageName.DIAL_REQUEST, request)
        except (PeerNotConnected, EventPublishError) as e:
            self._fail(e)
            return session

        self._reporter.report_dialing(bridge, item_id)
        return session

    def on_call_status(self, message: CallStatus) -> None:
        if not self._accepts(message.cycle_id, MessageName.CALL_STATUS):
            return

        if message.state in _CONNECTED_STATES and self._state is CycleState.DIALING:
            self._transition(CycleState.CONNECTED_CALL)
        elif message.state is CallState.RECORDING and self._state in (
            CycleState.DIALING,
            CycleState.CONNECTED_CALL,
        ):
            self._transition(CycleState.RECORDING)
        elif message.state is CallState.FAILED and self._state in _AWAITING_RECORDING:
            self._fail("Call failed before a recording was made")
        else:
            logger.info(
                "Call status ignored",
                extra={"call_state": message.state.value, "state": self._state.value},
            )

    def on_recording_ready(self, message: RecordingReady) -> None:
        if not self._accepts(message.cycle_id, MessageName.RECORDING_READY):
            return
        if self._state not in _AWAITING_RECORDING:
            logger.warning(
                "Unexpected recording notification",
                extra={"state": self._state.value, "bridge": message.bridge},
            )
            return

        session = self._session
        self._transition(CycleState.TRANSCODING)
        logger.info("Recording is ready for transcoding", extra={"bridge": message.bridge})

        try:
            audio_file = self._transcoder.transcode(
                message.file or self._recording_file, self._transcoded_file
            )
        except TranscodingError as e:
            self._fail(e)
            return

        request = TranscriptionRequest(
            file=audio_file,
            locale=session.bridge.locale,
            cycle_id=session.cycle_id,
        )
        try:
            self._bus.send(PeerRole.WORKER, MessageName.TRANSCRIPTION_REQUEST, request)
        except PeerNotConnected as e:
            self._fail(WorkerNotReady(cause=e))
            return
        except EventPublishError as e:
            self._fail(e)
            return

        self._transition(CycleState.AWAITING_TRANSCRIPTION)

    def on_transcription_result(self, message: TranscriptionResult) -> None:
        if not self._accepts(message.cycle_id, MessageName.TRANSCRIPTION_RESULT):
            return
        if self._state is not CycleState.AWAITING_TRANSCRIPTION:
            logger.warning(
                "Unexpected transcription result", extra={"state": self._state.value}
            )
            return

        if message.error is not None:
            self._fail(f"Transcription failed: {message.error}")
            return

        session = self._session
        self._transition(CycleState.SCORING)
        logger.info("Transcription available", extra={"text": message.text})
        try:
            score = self._scorer.score_for_locale(session.bridge.locale, message.text)
        except UnsupportedLocale as e:
            self._fail(e)
            return

        self._finish(CycleState.REPORTED, score=score, text=message.text)
        self._reporter.report_score(score, message.text, session.conversation_item_id)

    def _accepts(self, cycle_id: str | None, name: MessageName) -> bool:
        if self._session is None:
            logger.warning("No test call in progress", extra={"message_name": name.value})
            return False
        if cycle_id is not None and cycle_id != self._session.cycle_id:
            logger.warning(
                "Stale message ignored",
                extra={
                    "message_name": name.value,
                    "cycle_id": cycle_id,
                    "current_cycle_id": self._session.cycle_id,
                },
            )
            return False
        return True

    def _transition(self, state: CycleState) -> None:
        self._cancel_state_timer()
        logger.info(
            "Cycle state changed",
            extra={"from_state": self._state.value, "to_state": state.value},
        )
        self._state = state

        timeout_s = self._timeouts.get(state, 0)
        if timeout_s > 0:
            cycle_id = self._session.cycle_id
            self._state_timer = self._timers.call_later(
                timeout_s, lambda: self._on_timeout(cycle_id, state, timeout_s)
            )

    def _on_timeout(self, cycle_id: str, state: CycleState, timeout_s: float) -> None:
        self._state_timer = None
        if self._session is None or self._session.cycle_id != cycle_id:
            return
        if self._state is not state:
            return
        error = CallTimedOut(state.value, timeout_s)
        logger.error("Test call timed out", extra={"state": state.value})
        item_id = self._session.conversation_item_id
        self._finish(CycleState.TIMED_OUT, error=str(error))
        self._reporter.report_error(error, item_id)

    def _cancel_state_timer(self) -> None:
        if self._state_timer is not None:
            self._timers.cancel(self._state_timer)
            self._state_timer = None

    def _fail(self, error: Exception | str) -> None:
        logger.error(
            "Test call failed",
            extra={"state": self._state.value, "error": str(error)},
        )
        item_id = self._session.conversation_item_id
        self._finish(CycleState.FAILED, error=str(error))
        self._reporter.report_error(error, item_id)

    def _finish(self, state: CycleState, **result: Any) -> None:
        self._cancel_state_timer()
        session = self._session
        outcome = CycleOutcome(session=session, state=state, **result)
        self._state = state
        self._session = None
        self.last_outcome = outcome
        callback, self._on_complete = self._on_complete, None
        logger.info(
            "Test cycle finished",
            extra={
                "cycle_id": session.cycle_id,
                "outcome": state.value,
                "score": outcome.score,
            },
        )
        if callback is not None:
            callback(outcome)
