"""Controller process: wires the bus to the logon loop and the test pipeline."""

from bridge_tester.common import setup_logging
from bridge_tester.common.infrastructure import MessageBus

from .handlers import CallOrchestrator, CommandHandler
from .logon import LogonLoop

logger = setup_logging()


class Controller:
    """Runs the controller event loop: bus messages and timers on one thread."""

    def __init__(
        self,
        bus: MessageBus,
        logon: LogonLoop,
        orchestrator: CallOrchestrator,
        commands: CommandHandler,
    ):
        self._bus = bus
        self._logon = logon
        self._orchestrator = orchestrator
        self._commands = commands

    def start(self) -> None:
        """Logs on and serves bus messages until the process is terminated."""
        self._orchestrator.register(self._bus)
        self._commands.register(self._bus)
        logger.info("Controller initialized, logging on")
        self._logon.start()
        self._bus.consume()
