"""Shared fixtures: in-memory stand-ins for the bus, timers and collaborators."""

import pytest

from bridge_tester.common import PeerNotConnected, PeerRole
from bridge_tester.common.infrastructure import MessageBus, PeerBus, PeerHandle
from bridge_tester.controller.domain import (
    Bridge,
    ConfigurationStore,
    LocaleRegistry,
    Scorer,
)
from bridge_tester.controller.exceptions import ConnectionFailure, TranscodingError
from bridge_tester.controller.handlers import (
    BridgeTestScheduler,
    CallOrchestrator,
    CommandHandler,
)
from bridge_tester.controller.infrastructure.interfaces import (
    ConversationClient,
    TimerService,
    Transcoder,
)
from bridge_tester.controller.logon import LogonLoop
from bridge_tester.controller.reporting import ConversationReporter

RECORDING_FILE = "/tmp/bridge-tester-test/recording.webm"
TRANSCODED_FILE = "/tmp/bridge-tester-test/recording.wav"


class FakeTimers(TimerService):
    """Manual clock: callbacks fire only when the test advances time."""

    def __init__(self):
        self.now = 0.0
        self._pending = {}
        self._next_handle = 0

    def call_later(self, delay_s, callback):
        self._next_handle += 1
        self._pending[self._next_handle] = (self.now + delay_s, callback)
        return self._next_handle

    def cancel(self, handle):
        self._pending.pop(handle, None)

    @property
    def pending(self):
        return sorted(due - self.now for due, _ in self._pending.values())

    def advance(self, seconds):
        target = self.now + seconds
        while True:
            due_handles = [
                (due, handle)
                for handle, (due, _) in self._pending.items()
                if due <= target
            ]
            if not due_handles:
                break
            due, handle = min(due_handles)
            _, callback = self._pending.pop(handle)
            self.now = due
            callback()
        self.now = target


class FakeBus(MessageBus):
    def __init__(self, roles=(PeerRole.CAPTURE, PeerRole.WORKER)):
        self.peers = {}
        self.sent = []
        self.handlers = {}
        for role in roles:
            self.register_peer(role, f"amq.gen-{role.value}")

    def register_peer(self, role, address):
        handle = PeerHandle(role=role, address=address)
        self.peers[handle.role] = handle
        return handle

    def is_connected(self, role):
        return role in self.peers

    def send(self, role, name, payload):
        if role not in self.peers:
            raise PeerNotConnected(role.value)
        self.sent.append((role, name, payload))

    def on_message(self, name, handler):
        self.handlers.setdefault(name, []).append(handler)

    def consume(self):
        pass

    def deliver(self, name, payload):
        for handler in self.handlers.get(name, []):
            handler(payload)

    def sent_named(self, name):
        return [payload for _, sent_name, payload in self.sent if sent_name == name]


class FakePeerBus(PeerBus):
    def __init__(self):
        self.announced = []
        self.emitted = []
        self.handlers = {}
        self.consumed = False

    def announce_ready(self, role):
        self.announced.append(role)

    def emit(self, name, payload):
        self.emitted.append((name, payload))

    def on_message(self, name, handler):
        self.handlers.setdefault(name, []).append(handler)

    def call_threadsafe(self, callback):
        callback()

    def consume(self):
        self.consumed = True

    def deliver(self, name, payload):
        for handler in self.handlers.get(name, []):
            handler(payload)


class FakeConversation(ConversationClient):
    def __init__(self, logon_failures=0, user="bridge-bot"):
        self.logon_failures = logon_failures
        self.logon_calls = 0
        self.user = user
        self.logged_out = False
        self.posts = []

    def logon(self):
        self.logon_calls += 1
        if self.logon_calls <= self.logon_failures:
            raise ConnectionFailure(Exception("connection refused"))
        return self.user

    def logout(self):
        self.logged_out = True

    def post_message(self, conversation_id, subject, content, parent_item_id=None):
        self.posts.append(
            {
                "conversation_id": conversation_id,
                "subject": subject,
                "content": content,
                "parent_item_id": parent_item_id,
            }
        )
        return f"item-{len(self.posts)}"

    def subjects(self):
        return [post["subject"] for post in self.posts]


class FakeTranscoder(Transcoder):
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def transcode(self, source, destination):
        self.calls.append((source, destination))
        if self.error is not None:
            raise TranscodingError(source, self.error)
        return destination


@pytest.fixture
def timers():
    return FakeTimers()


@pytest.fixture
def bus():
    return FakeBus()


@pytest.fixture
def conversation():
    return FakeConversation()


@pytest.fixture
def reporter(conversation):
    return ConversationReporter(conversation, "conv-1")


@pytest.fixture
def registry():
    return LocaleRegistry()


@pytest.fixture
def store(registry):
    return ConfigurationStore(registry)


@pytest.fixture
def scorer(registry):
    return Scorer(registry)


@pytest.fixture
def transcoder():
    return FakeTranscoder()


@pytest.fixture
def make_orchestrator(bus, transcoder, scorer, reporter, timers):
    def _make(**timeouts):
        orchestrator = CallOrchestrator(
            bus,
            transcoder,
            scorer,
            reporter,
            timers,
            recording_file=RECORDING_FILE,
            transcoded_file=TRANSCODED_FILE,
            **timeouts,
        )
        orchestrator.register(bus)
        return orchestrator

    return _make


@pytest.fixture
def orchestrator(make_orchestrator):
    return make_orchestrator()


@pytest.fixture
def scheduler(store, orchestrator, timers, reporter):
    return BridgeTestScheduler(store, orchestrator, timers, reporter)


@pytest.fixture
def logon(conversation, timers):
    return LogonLoop(conversation, timers)


@pytest.fixture
def commands(store, scheduler, orchestrator, reporter, conversation, logon, registry, bus):
    handler = CommandHandler(
        store, scheduler, orchestrator, reporter, conversation, logon, registry
    )
    handler.register(bus)
    return handler


@pytest.fixture
def english_bridge():
    return Bridge(number="5551234", pin="9999", locale="en-US")
