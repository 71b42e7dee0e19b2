"""Domain layer exports."""

from .commands import COMMAND_TREE, Command, CommandNode, ParsedCommand, build_help, parse_command
from .configuration_store import ConfigurationStore
from .locales import DEFAULT_LOCALE, LocaleRegistry
from .models import (
    MIN_INTERVAL_MS,
    Bridge,
    BridgeTestConfiguration,
    CallSession,
    CycleOutcome,
    CycleState,
    Mode,
    Repeat,
)
from .scorer import Scorer, dice_coefficient

__all__ = [
    "COMMAND_TREE",
    "Command",
    "CommandNode",
    "ParsedCommand",
    "build_help",
    "parse_command",
    "ConfigurationStore",
    "DEFAULT_LOCALE",
    "LocaleRegistry",
    "MIN_INTERVAL_MS",
    "Bridge",
    "BridgeTestConfiguration",
    "CallSession",
    "CycleOutcome",
    "CycleState",
    "Mode",
    "Repeat",
    "Scorer",
    "dice_coefficient",
]
