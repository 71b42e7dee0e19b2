from unittest.mock import MagicMock

import assemblyai as aai
import pytest
from pika.exceptions import AMQPConnectionError

from bridge_tester.common import MessageName, PeerDiscovery, PeerRole, TranscriptionRequest
from bridge_tester.transcriber.exceptions import TranscriptionError
from bridge_tester.transcriber.handlers import TranscriptionRequestHandler
from bridge_tester.transcriber.infrastructure import AssemblyAITranscriber
from bridge_tester.transcriber.infrastructure.assemblyai_transcriber import language_code
from bridge_tester.transcriber.infrastructure.interfaces import TranscriptionService
from bridge_tester.transcriber.worker import TranscriberWorker

from .conftest import FakePeerBus


class FakeTranscription(TranscriptionService):
    def __init__(self, text="welcome to the conference", error=None):
        self.text = text
        self.error = error
        self.calls = []

    def transcribe(self, audio_file, locale):
        self.calls.append((audio_file, locale))
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def audio_file(tmp_path):
    path = tmp_path / "recording.wav"
    path.write_bytes(b"RIFF")
    return str(path)


def connect_worker(service):
    bus = FakePeerBus()
    worker = TranscriberWorker(lambda: bus, TranscriptionRequestHandler(service))
    worker.connect()
    return bus


def test_worker_announces_itself(audio_file):
    bus = connect_worker(FakeTranscription())
    assert bus.announced == [PeerRole.WORKER]


def test_request_is_answered_with_text(audio_file):
    service = FakeTranscription()
    bus = connect_worker(service)

    bus.deliver(
        MessageName.TRANSCRIPTION_REQUEST,
        TranscriptionRequest(file=audio_file, locale="en-US", cycle_id="c1"),
    )

    assert service.calls == [(audio_file, "en-US")]
    ((name, result),) = bus.emitted
    assert name is MessageName.TRANSCRIPTION_RESULT
    assert result.text == "welcome to the conference"
    assert result.error is None
    assert result.cycle_id == "c1"


def test_missing_file_is_answered_with_error(tmp_path):
    service = FakeTranscription()
    bus = connect_worker(service)
    missing = str(tmp_path / "nothing.wav")

    bus.deliver(
        MessageName.TRANSCRIPTION_REQUEST,
        TranscriptionRequest(file=missing, locale="en-US", cycle_id="c2"),
    )

    assert service.calls == []
    ((_, result),) = bus.emitted
    assert result.text is None
    assert missing in result.error
    assert result.cycle_id == "c2"


def test_transcription_failure_is_answered_with_error(audio_file):
    bus = connect_worker(
        FakeTranscription(error=TranscriptionError(audio_file, Exception("quota exceeded")))
    )

    bus.deliver(
        MessageName.TRANSCRIPTION_REQUEST,
        TranscriptionRequest(file=audio_file, locale="en-US"),
    )

    ((_, result),) = bus.emitted
    assert "quota exceeded" in result.error


def test_worker_reconnects_after_connection_loss():
    bus = FakePeerBus()
    attempts = []
    sleeps = []

    def bus_factory():
        attempts.append(1)
        if len(attempts) < 3:
            raise AMQPConnectionError("refused")
        return bus

    worker = TranscriberWorker(
        bus_factory,
        TranscriptionRequestHandler(FakeTranscription()),
        sleep=sleeps.append,
    )
    worker.start()

    assert sleeps == [1.5, 1.5]
    assert bus.consumed
    assert bus.announced == [PeerRole.WORKER]


@pytest.mark.parametrize(
    "locale, code",
    [("en-US", "en_us"), ("en-GB", "en_uk"), ("de-DE", "de"), ("fr-FR", "fr")],
)
def test_language_code(locale, code):
    assert language_code(locale) == code


def test_assemblyai_transcriber_returns_text(audio_file):
    client = MagicMock()
    client.transcribe.return_value = MagicMock(
        status=aai.TranscriptStatus.completed, text="hello"
    )

    text = AssemblyAITranscriber(client).transcribe(audio_file, "de-DE")

    assert text == "hello"
    config = client.transcribe.call_args.kwargs["config"]
    assert config.language_code == "de"


def test_assemblyai_error_status_raises(audio_file):
    client = MagicMock()
    client.transcribe.return_value = MagicMock(
        status=aai.TranscriptStatus.error, error="bad audio", text=None
    )

    with pytest.raises(TranscriptionError, match="bad audio"):
        AssemblyAITranscriber(client).transcribe(audio_file, "en-US")


def test_assemblyai_client_failure_raises(audio_file):
    client = MagicMock()
    client.transcribe.side_effect = ConnectionError("unreachable")

    with pytest.raises(TranscriptionError) as exc_info:
        AssemblyAITranscriber(client).transcribe(audio_file, "en-US")
    assert isinstance(exc_info.value.cause, ConnectionError)


def test_worker_announces_again_when_controller_asks():
    bus = connect_worker(FakeTranscription())

    bus.deliver(MessageName.PEER_DISCOVERY, PeerDiscovery())

    assert bus.announced == [PeerRole.WORKER, PeerRole.WORKER]
