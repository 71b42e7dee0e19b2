import pytest

from bridge_tester.controller.domain import COMMAND_TREE, Command, build_help, parse_command


@pytest.mark.parametrize(
    "text, command, params",
    [
        ("status", Command.STATUS, ()),
        ("version", Command.VERSION, ()),
        ("help", Command.HELP, ()),
        ("dial 5551234 9999 EN_US", Command.DIAL, ("5551234", "9999", "EN_US")),
        ("test start", Command.START_TEST, ()),
        ("test stop", Command.STOP_TEST, ()),
        ("TEST Set ALL ONCE 60000", Command.SET_CONFIG, ("ALL", "ONCE", "60000")),
        ("test show", Command.SHOW_CONFIG, ()),
        ("test add 5551234", Command.ADD_BRIDGE, ("5551234",)),
        ("  shutdown  ", Command.SHUTDOWN, ()),
    ],
)
def test_parse_known_commands(text, command, params):
    parsed = parse_command(text)
    assert parsed.command is command
    assert parsed.params == params


@pytest.mark.parametrize("text", ["", "test", "test restart", "make coffee"])
def test_parse_unknown_commands(text):
    parsed = parse_command(text)
    assert parsed.command is Command.UNKNOWN
    assert parsed.text == text.strip()


def test_help_lists_every_leaf():
    help_text = build_help()
    entries = help_text.split("<br/>")

    assert len(entries) == 10
    assert "<b>test set <ENGLISH|ALL> [ONCE|ENDLESS] [intervalMs]</b>: Set the testing configuration" in entries
    assert "<b>dial <number> [pin] [locale]</b>: Run a single test call to a bridge" in entries
    assert "<b>status</b>: Show bot status" in entries


def test_every_command_except_unknown_is_reachable():
    def commands(node):
        found = {node.command} if node.command else set()
        for child in node.children:
            found |= commands(child)
        return found

    assert commands(COMMAND_TREE) == set(Command) - {Command.UNKNOWN}
