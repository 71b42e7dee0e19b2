"""Handler exports."""

from .bridge_scheduler import BridgeTestScheduler
from .call_orchestrator import CallOrchestrator
from .command_handler import CommandHandler

__all__ = ["BridgeTestScheduler", "CallOrchestrator", "CommandHandler"]
