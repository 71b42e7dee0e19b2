"""Operator command tree, parser and help renderer."""

from collections.abc import Iterator
from enum import Enum

from pydantic import BaseModel


class Command(str, Enum):
    STATUS = "status"
    VERSION = "version"
    HELP = "help"
    DIAL = "dial"
    START_TEST = "startConfTest"
    STOP_TEST = "stopConfTest"
    SET_CONFIG = "setConfConf"
    SHOW_CONFIG = "showConfConf"
    ADD_BRIDGE = "addBridge"
    SHUTDOWN = "shutdown"
    UNKNOWN = "unknown"


class CommandNode(BaseModel, frozen=True):
    """One keyword of the command tree; leaves carry a command."""

    keyword: str
    description: str = ""
    command: Command | None = None
    usage: str = ""
    children: tuple["CommandNode", ...] = ()


class ParsedCommand(BaseModel, frozen=True):
    command: Command
    params: tuple[str, ...] = ()
    text: str = ""


COMMAND_TREE = CommandNode(
    keyword="",
    children=(
        CommandNode(keyword="status", command=Command.STATUS, description="Show bot status"),
        CommandNode(keyword="version", command=Command.VERSION, description="Show bot version"),
        CommandNode(keyword="help", command=Command.HELP, description="Show this help"),
        CommandNode(
            keyword="dial",
            command=Command.DIAL,
            usage="<number> [pin] [locale]",
            description="Run a single test call to a bridge",
        ),
        CommandNode(
            keyword="test",
            children=(
                CommandNode(
                    keyword="start",
                    command=Command.START_TEST,
                    description="Start testing the configured bridges",
                ),
                CommandNode(
                    keyword="stop",
                    command=Command.STOP_TEST,
                    description="Stop testing after the current test call",
                ),
                CommandNode(
                    keyword="set",
                    command=Command.SET_CONFIG,
                    usage="<ENGLISH|ALL> [ONCE|ENDLESS] [intervalMs]",
                    description="Set the testing configuration",
                ),
                CommandNode(
                    keyword="show",
                    command=Command.SHOW_CONFIG,
                    description="Show the testing configuration",
                ),
                CommandNode(
                    keyword="add",
                    command=Command.ADD_BRIDGE,
                    usage="<number> [pin] [locale]",
                    description="Add a bridge to test",
                ),
            ),
        ),
        CommandNode(keyword="shutdown", command=Command.SHUTDOWN, description="Terminate the bot"),
    ),
)


def parse_command(text: str, tree: CommandNode = COMMAND_TREE) -> ParsedCommand:
    """
    Walks the tree one keyword at a time; the tokens left after a leaf
    are its parameters.
    """
    tokens = text.split()
    node = tree
    while tokens and node.command is None:
        keyword = tokens[0].lower()
        child = next((c for c in node.children if c.keyword == keyword), None)
        if child is None:
            break
        node = child
        tokens.pop(0)

    if node.command is None:
        return ParsedCommand(command=Command.UNKNOWN, text=text.strip())
    return ParsedCommand(command=node.command, params=tuple(tokens), text=text.strip())


def _leaves(node: CommandNode, prefix: tuple[str, ...]) -> Iterator[tuple[str, CommandNode]]:
    path = prefix + ((node.keyword,) if node.keyword else ())
    if node.command is not None:
        yield " ".join(path), node
    for child in node.children:
        yield from _leaves(child, path)


def build_help(tree: CommandNode = COMMAND_TREE) -> str:
    lines = []
    for path, node in _leaves(tree, ()):
        usage = f" {node.usage}" if node.usage else ""
        lines.append(f"<b>{path}{usage}</b>: {node.description}")
    return "<br/>".join(lines)
