from bridge_tester.controller.logon import LogonLoop, LogonState

from .conftest import FakeConversation


def test_logon_waits_before_reporting_connected(conversation, timers):
    connected = []
    loop = LogonLoop(conversation, timers, on_connected=connected.append)

    loop.start()
    assert loop.state is LogonState.CONNECTING
    assert not loop.connected

    timers.advance(4)
    assert not loop.connected
    timers.advance(1)

    assert loop.connected
    assert loop.user == "bridge-bot"
    assert connected == ["bridge-bot"]


def test_logon_retries_until_it_succeeds(timers):
    conversation = FakeConversation(logon_failures=7)
    loop = LogonLoop(conversation, timers)

    loop.start()
    assert timers.pending == [2.0]
    timers.advance(2.0 * 7)

    assert loop.attempts == 8
    assert loop.state is LogonState.CONNECTING
    timers.advance(5.0)
    assert loop.connected


def test_start_is_idempotent(conversation, timers):
    loop = LogonLoop(conversation, timers)
    loop.start()
    loop.start()
    assert conversation.logon_calls == 1
