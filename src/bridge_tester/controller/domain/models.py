"""Domain models for the controller."""

from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator

MIN_INTERVAL_MS = 60000


class Mode(str, Enum):
    """Which bridges the scheduler tests."""

    ENGLISH_ONLY = "ENGLISH_ONLY"
    ALL_LOCALES = "ALL_LOCALES"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            key = value.strip().upper()
            key = {"ENGLISH": "ENGLISH_ONLY", "ALL": "ALL_LOCALES"}.get(key, key)
            for member in cls:
                if member.value == key:
                    return member
        return None


class Repeat(str, Enum):
    """Whether the scheduler stops after one cycle."""

    ONCE = "ONCE"
    ENDLESS = "ENDLESS"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            key = value.strip().upper()
            for member in cls:
                if member.value == key:
                    return member
        return None


class Bridge(BaseModel, frozen=True):
    """A conference dial-in target."""

    number: str = Field(min_length=1)
    pin: str | None = None
    locale: str


class BridgeTestConfiguration(BaseModel, frozen=True):
    """Scheduling policy and the ordered bridge list."""

    mode: Mode = Mode.ENGLISH_ONLY
    repeat: Repeat = Repeat.ENDLESS
    interval_ms: int = MIN_INTERVAL_MS
    bridges: tuple[Bridge, ...] = ()

    @field_validator("interval_ms")
    @classmethod
    def _interval_floor(cls, value: int) -> int:
        if value < MIN_INTERVAL_MS:
            raise ValueError(
                f"interval is too short: {value} ms (minimum {MIN_INTERVAL_MS} ms)"
            )
        return value


class CycleState(str, Enum):
    IDLE = "IDLE"
    DIALING = "DIALING"
    CONNECTED_CALL = "CONNECTED_CALL"
    RECORDING = "RECORDING"
    TRANSCODING = "TRANSCODING"
    AWAITING_TRANSCRIPTION = "AWAITING_TRANSCRIPTION"
    SCORING = "SCORING"
    REPORTED = "REPORTED"
    FAILED = "FAILED"
    TIMED_OUT = "TIMED_OUT"

    @property
    def terminal(self) -> bool:
        return self in (CycleState.REPORTED, CycleState.FAILED, CycleState.TIMED_OUT)


class CallSession(BaseModel, frozen=True):
    """The single in-flight test call."""

    bridge: Bridge
    conversation_item_id: str | None = None
    cycle_id: str = Field(default_factory=lambda: uuid4().hex)
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class CycleOutcome(BaseModel, frozen=True):
    """Terminal result of one test cycle."""

    session: CallSession
    state: CycleState
    score: float | None = None
    text: str | None = None
    error: str | None = None
