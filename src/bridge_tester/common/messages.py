"""Bus message vocabulary shared by the controller and its peers."""

from enum import Enum

from pydantic import BaseModel, model_validator


class MessageName(str, Enum):
    """Names carried in the AMQP ``type`` property of every bus message."""

    PEER_READY = "peer-ready"
    PEER_DISCOVERY = "peer-discovery"
    DIAL_REQUEST = "dial-request"
    CALL_STATUS = "call-status"
    RECORDING_READY = "recording-ready"
    TRANSCRIPTION_REQUEST = "transcription-request"
    TRANSCRIPTION_RESULT = "transcription-result"
    OPERATOR_COMMAND = "operator-command"


class PeerRole(str, Enum):
    """Roles a peer process can register under."""

    CAPTURE = "capture"
    WORKER = "worker"


class CallState(str, Enum):
    """Call progress reported by the capture peer."""

    DIALING = "dialing"
    DELIVERED = "delivered"
    ACTIVE = "active"
    RECORDING = "recording"
    ENDED = "ended"
    FAILED = "failed"


class PeerReady(BaseModel, frozen=True):
    """A peer announcing it can receive messages at ``address``."""

    role: PeerRole
    address: str


class PeerDiscovery(BaseModel, frozen=True):
    """Broadcast by a starting controller; every peer answers with ``peer-ready``."""


class DialRequest(BaseModel, frozen=True):
    number: str
    pin: str | None = None
    locale: str
    cycle_id: str | None = None


class CallStatus(BaseModel, frozen=True):
    state: CallState
    cycle_id: str | None = None


class RecordingReady(BaseModel, frozen=True):
    bridge: str
    file: str | None = None
    cycle_id: str | None = None


class TranscriptionRequest(BaseModel, frozen=True):
    file: str
    locale: str
    cycle_id: str | None = None


class TranscriptionResult(BaseModel, frozen=True):
    """Outcome of a transcription: exactly one of ``text`` or ``error``."""

    text: str | None = None
    error: str | None = None
    cycle_id: str | None = None

    @model_validator(mode="after")
    def _text_or_error(self) -> "TranscriptionResult":
        if (self.text is None) == (self.error is None):
            raise ValueError("exactly one of 'text' or 'error' must be set")
        return self


class OperatorCommand(BaseModel, frozen=True):
    text: str
    item_id: str | None = None


MESSAGE_MODELS: dict[MessageName, type[BaseModel]] = {
    MessageName.PEER_READY: PeerReady,
    MessageName.PEER_DISCOVERY: PeerDiscovery,
    MessageName.DIAL_REQUEST: DialRequest,
    MessageName.CALL_STATUS: CallStatus,
    MessageName.RECORDING_READY: RecordingReady,
    MessageName.TRANSCRIPTION_REQUEST: TranscriptionRequest,
    MessageName.TRANSCRIPTION_RESULT: TranscriptionResult,
    MessageName.OPERATOR_COMMAND: OperatorCommand,
}
