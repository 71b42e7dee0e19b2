from bridge_tester.common import MessageName, OperatorCommand
from bridge_tester.controller.worker import Controller


class RecordingBus:
    """Wraps the fake bus to note when consuming starts."""

    def __init__(self, bus):
        self._bus = bus
        self.consumed = False

    def __getattr__(self, name):
        return getattr(self._bus, name)

    def consume(self):
        self.consumed = True


def test_controller_logs_on_and_serves_commands(
    bus, logon, orchestrator, commands, timers, conversation
):
    # the commands fixture registers itself; start() must not need that
    bus.handlers.clear()
    recording_bus = RecordingBus(bus)
    controller = Controller(recording_bus, logon, orchestrator, commands)

    controller.start()

    assert recording_bus.consumed
    assert conversation.logon_calls == 1
    timers.advance(5)
    bus.deliver(MessageName.OPERATOR_COMMAND, OperatorCommand(text="version"))
    assert conversation.posts[-1]["content"] == "Version: <b>1.0.0</b>"
    assert MessageName.TRANSCRIPTION_RESULT in bus.handlers
