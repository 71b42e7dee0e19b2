"""Reconnecting run loop shared by the peer processes."""

import time
from abc import ABC, abstractmethod
from collections.abc import Callable

from pika.exceptions import AMQPConnectionError

from bridge_tester.common.infrastructure import PeerBus
from bridge_tester.common.logging import setup_logging
from bridge_tester.common.messages import MessageName, PeerRole

logger = setup_logging()


class PeerProcess(ABC):
    """
    Connects a peer to the controller and keeps it connected.

    Every (re)connection opens a fresh bus, registers the peer's handlers on
    it and announces ``peer-ready`` so the controller replaces any stale
    handle it kept for this role. A controller that starts later broadcasts
    ``peer-discovery``, which the peer answers with another ``peer-ready``.
    """

    role: PeerRole

    def __init__(
        self,
        bus_factory: Callable[[], PeerBus],
        reconnect_delay_s: float = 1.5,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._bus_factory = bus_factory
        self._reconnect_delay_s = reconnect_delay_s
        self._sleep = sleep
        self._bus: PeerBus | None = None

    @abstractmethod
    def register_handlers(self, bus: PeerBus) -> None:
        """Registers the handlers for the messages this peer consumes."""
        pass

    def connect(self) -> PeerBus:
        """Opens a bus, wires the handlers and announces readiness."""
        bus = self._bus_factory()
        bus.on_message(
            MessageName.PEER_DISCOVERY, lambda _: self._on_discovery(bus)
        )
        self.register_handlers(bus)
        bus.announce_ready(self.role)
        self._bus = bus
        logger.info("Peer connected", extra={"role": self.role.value})
        return bus

    def _on_discovery(self, bus: PeerBus) -> None:
        logger.info("Controller asked for peers", extra={"role": self.role.value})
        bus.announce_ready(self.role)

    def start(self) -> None:
        """Serves the controller forever, reconnecting after connection loss."""
        logger.info("Peer starting", extra={"role": self.role.value})
        while True:
            try:
                self.connect().consume()
                logger.warning(
                    "Peer stopped consuming", extra={"role": self.role.value}
                )
                return
            except AMQPConnectionError:
                logger.exception(
                    "Lost connection to the controller bus",
                    extra={
                        "role": self.role.value,
                        "retry_in_s": self._reconnect_delay_s,
                    },
                )
                self._bus = None
                self._sleep(self._reconnect_delay_s)
