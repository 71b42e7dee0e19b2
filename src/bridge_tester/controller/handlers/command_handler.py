"""Handler for operator commands."""

from collections.abc import Callable

from bridge_tester import __version__
from bridge_tester.common import MessageName, OperatorCommand, setup_logging
from bridge_tester.common.infrastructure import MessageBus
from bridge_tester.controller.domain import (
    Bridge,
    Command,
    ConfigurationStore,
    LocaleRegistry,
    ParsedCommand,
    build_help,
    parse_command,
)
from bridge_tester.controller.exceptions import (
    ConfigurationValidationError,
    CycleInProgress,
    NoBridgesConfigured,
    NoEligibleBridges,
    ShutdownRequested,
)
from bridge_tester.controller.infrastructure.interfaces import ConversationClient
from bridge_tester.controller.logon import LogonLoop
from bridge_tester.controller.reporting import ConversationReporter

from .bridge_scheduler import BridgeTestScheduler
from .call_orchestrator import CallOrchestrator

logger = setup_logging()

_REPORTED_ERRORS = (
    ConfigurationValidationError,
    CycleInProgress,
    NoBridgesConfigured,
    NoEligibleBridges,
)


class CommandHandler:
    """Maps each parsed command to the controller operation it triggers."""

    def __init__(
        self,
        store: ConfigurationStore,
        scheduler: BridgeTestScheduler,
        orchestrator: CallOrchestrator,
        reporter: ConversationReporter,
        client: ConversationClient,
        logon: LogonLoop,
        registry: LocaleRegistry,
    ):
        self._store = store
        self._scheduler = scheduler
        self._orchestrator = orchestrator
        self._reporter = reporter
        self._client = client
        self._logon = logon
        self._registry = registry
        self._operations: dict[Command, Callable[[ParsedCommand, str | None], None]] = {
            Command.STATUS: self._report_status,
            Command.VERSION: self._report_version,
            Command.HELP: self._show_help,
            Command.DIAL: self._dial,
            Command.START_TEST: self._start_test,
            Command.STOP_TEST: self._stop_test,
            Command.SET_CONFIG: self._set_configuration,
            Command.SHOW_CONFIG: self._show_configuration,
            Command.ADD_BRIDGE: self._add_bridge,
            Command.SHUTDOWN: self._shutdown,
            Command.UNKNOWN: self._not_understood,
        }

    def register(self, bus: MessageBus) -> None:
        bus.on_message(MessageName.OPERATOR_COMMAND, self.handle)

    def handle(self, message: OperatorCommand) -> None:
        """
        Runs one operator command and replies under ``message.item_id``.

        Commands are dropped until the bot is logged on. Validation and
        scheduling errors are reported back to the conversation.
        """
        if not self._logon.connected:
            logger.warning(
                "Command dropped, bot is not connected",
                extra={"command_text": message.text, "logon_state": self._logon.state.value},
            )
            return

        parsed = parse_command(message.text)
        logger.info(
            "Processing command",
            extra={"command": parsed.command.value, "params": list(parsed.params)},
        )
        try:
            self._operations[parsed.command](parsed, message.item_id)
        except _REPORTED_ERRORS as e:
            logger.warning(
                "Command failed",
                extra={"command": parsed.command.value, "error": str(e)},
            )
            self._reporter.report_error(e, message.item_id)

    def _report_status(self, parsed: ParsedCommand, item_id: str | None) -> None:
        testing = "running" if self._scheduler.running else "stopped"
        self._reporter.post(
            None,
            f"Status <b>On</b>\nTest call: {self._orchestrator.state.value}\nTesting: {testing}",
            item_id,
        )

    def _report_version(self, parsed: ParsedCommand, item_id: str | None) -> None:
        self._reporter.post(None, f"Version: <b>{__version__}</b>", item_id)

    def _show_help(self, parsed: ParsedCommand, item_id: str | None) -> None:
        self._reporter.post("HELP", build_help(), item_id)

    def _dial(self, parsed: ParsedCommand, item_id: str | None) -> None:
        params = parsed.params
        if not params:
            logger.error("No number to dial")
            self._reporter.report_error("Unable to dial. Number missing", item_id)
            return
        bridge = Bridge(
            number=params[0],
            pin=params[1] if len(params) > 1 else None,
            locale=self._registry.normalize(params[2] if len(params) > 2 else "EN_US"),
        )
        self._orchestrator.run_cycle(bridge, item_id)

    def _start_test(self, parsed: ParsedCommand, item_id: str | None) -> None:
        self._scheduler.start(item_id)

    def _stop_test(self, parsed: ParsedCommand, item_id: str | None) -> None:
        self._scheduler.stop()
        self._reporter.post("TESTING", "Test will stop after current test is finished", item_id)

    def _set_configuration(self, parsed: ParsedCommand, item_id: str | None) -> None:
        params = parsed.params
        if not params:
            raise ConfigurationValidationError("Parameters are not provided. Use help")
        if len(params) > 3:
            raise ConfigurationValidationError("Too many parameters. Use help")

        if len(params) == 3:
            self._store.set_all(*params)
        elif len(params) == 2:
            self._store.set_all(
                params[0], params[1], self._store.configuration.interval_ms
            )
        else:
            self._store.set_mode(params[0])
        self._show_configuration(parsed, item_id)

    def _show_configuration(self, parsed: ParsedCommand, item_id: str | None) -> None:
        self._reporter.post("Testing Configuration", self._store.describe(), item_id)

    def _add_bridge(self, parsed: ParsedCommand, item_id: str | None) -> None:
        params = parsed.params
        if not params:
            raise ConfigurationValidationError("Bridge number missing. Use help")
        bridge = self._store.add_bridge(
            params[0],
            pin=params[1] if len(params) > 1 else None,
            locale=params[2] if len(params) > 2 else "EN_US",
        )
        self._reporter.post(
            "Bridge Added",
            f"{bridge.number} with locale {bridge.locale}",
            item_id,
        )

    def _shutdown(self, parsed: ParsedCommand, item_id: str | None) -> None:
        logger.warning("Shutting down", extra={"reason": "Terminated by user"})
        self._client.logout()
        raise ShutdownRequested("Terminated by user")

    def _not_understood(self, parsed: ParsedCommand, item_id: str | None) -> None:
        logger.info("Command not understood", extra={"command_text": parsed.text})
        self._reporter.post(None, f"I do not understand <b>[{parsed.text}]</b>", item_id)
