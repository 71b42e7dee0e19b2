"""Round-robin scheduling of test cycles across the configured bridges."""

from typing import Any

from bridge_tester.common import setup_logging
from bridge_tester.controller.domain import (
    DEFAULT_LOCALE,
    Bridge,
    BridgeTestConfiguration,
    ConfigurationStore,
    CycleOutcome,
    Mode,
    Repeat,
)
from bridge_tester.controller.exceptions import (
    CycleInProgress,
    NoBridgesConfigured,
    NoEligibleBridges,
)
from bridge_tester.controller.infrastructure.interfaces import TimerService
from bridge_tester.controller.reporting import ConversationReporter

from .call_orchestrator import CallOrchestrator

logger = setup_logging()


class BridgeTestScheduler:
    """
    Repeats test cycles against the configured bridges.

    The first cycle runs as soon as testing starts. With ``repeat=ENDLESS``
    a recurring timer is armed once that cycle ends and starts a cycle
    every ``interval_ms``; ticks that find a cycle still in flight are
    skipped. Stopping, or switching ``repeat`` to ``ONCE``, disarms the
    timer without interrupting the cycle in flight.
    """

    def __init__(
        self,
        store: ConfigurationStore,
        orchestrator: CallOrchestrator,
        timers: TimerService,
        reporter: ConversationReporter,
    ):
        self._store = store
        self._orchestrator = orchestrator
        self._timers = timers
        self._reporter = reporter
        self._timer: Any = None
        self._running = False
        self._item_id: str | None = None
        self.cycles_started = 0
        self.cycles_completed = 0
        store.add_listener(self._on_configuration_changed)

    @property
    def running(self) -> bool:
        return self._running

    @property
    def armed(self) -> bool:
        return self._timer is not None

    def start(self, item_id: str | None = None) -> Bridge:
        """
        Starts testing and runs the first cycle immediately.

        Raises:
            NoBridgesConfigured: If the bridge list is empty.
            NoEligibleBridges: If no configured bridge may be tested in the current mode.
            CycleInProgress: If testing is already running or a call is in flight.
        """
        if not self._store.bridges:
            raise NoBridgesConfigured()
        if self._running or self._orchestrator.busy:
            session = self._orchestrator.session
            raise CycleInProgress(session.bridge.number if session else "a bridge")

        bridge = self._select_bridge()
        self._running = True
        self._item_id = item_id
        logger.info(
            "Bridge testing started",
            extra=self._store.configuration.model_dump(mode="json", exclude={"bridges"}),
        )
        self._start_cycle(bridge)
        return bridge

    def stop(self) -> None:
        """Stops scheduling; a cycle in flight still runs to its end."""
        self._running = False
        self._disarm()
        logger.info(
            "Bridge testing stopped",
            extra={"cycle_in_flight": self._orchestrator.busy},
        )

    def _select_bridge(self) -> Bridge:
        config = self._store.configuration
        for _ in range(len(config.bridges)):
            bridge = self._store.next_bridge()
            if config.mode is Mode.ALL_LOCALES or bridge.locale == DEFAULT_LOCALE:
                return bridge
        if not config.bridges:
            raise NoBridgesConfigured()
        raise NoEligibleBridges(config.mode.value, DEFAULT_LOCALE)

    def _start_cycle(self, bridge: Bridge) -> None:
        self.cycles_started += 1
        self._orchestrator.run_cycle(bridge, self._item_id, on_complete=self._on_cycle_complete)

    def _on_tick(self) -> None:
        self._timer = None
        if not self._running:
            return
        self._arm()

        if self._orchestrator.busy:
            logger.warning("Previous test call still in progress, skipping this test")
            return
        try:
            bridge = self._select_bridge()
        except (NoBridgesConfigured, NoEligibleBridges) as e:
            logger.error("No bridge to test", extra={"error": str(e)})
            self._reporter.report_error(e, self._item_id)
            return
        self._start_cycle(bridge)

    def _on_cycle_complete(self, outcome: CycleOutcome) -> None:
        self.cycles_completed += 1
        logger.info(
            "Keep testing after this?",
            extra={
                "running": self._running,
                "repeat": self._store.configuration.repeat.value,
                "outcome": outcome.state.value,
            },
        )
        if not self._running:
            return
        if self._store.configuration.repeat is Repeat.ENDLESS:
            if self._timer is None:
                self._arm()
        else:
            self._disarm()
            self._running = False

    def _on_configuration_changed(
        self, previous: BridgeTestConfiguration, current: BridgeTestConfiguration
    ) -> None:
        if current.repeat is not Repeat.ENDLESS and self._timer is not None:
            logger.info("Repeat is no longer endless, disarming test timer")
            self._disarm()
            if not self._orchestrator.busy:
                self._running = False
        elif current.interval_ms != previous.interval_ms and self._timer is not None:
            self._disarm()
            self._arm()

    def _arm(self) -> None:
        interval_s = self._store.configuration.interval_ms / 1000
        self._timer = self._timers.call_later(interval_s, self._on_tick)
        logger.info("Test timer armed", extra={"interval_s": interval_s})

    def _disarm(self) -> None:
        if self._timer is not None:
            self._timers.cancel(self._timer)
            self._timer = None
