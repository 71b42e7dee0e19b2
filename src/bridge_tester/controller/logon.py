"""Logon retry loop that gates all conversation and test activity."""

from collections.abc import Callable
from enum import Enum
from typing import Any

from bridge_tester.common import setup_logging
from bridge_tester.controller.exceptions import ConnectionFailure
from bridge_tester.controller.infrastructure.interfaces import (
    ConversationClient,
    TimerService,
)

logger = setup_logging()


class LogonState(str, Enum):
    DISCONNECTED = "DISCONNECTED"
    CONNECTING = "CONNECTING"
    CONNECTED = "CONNECTED"


class LogonLoop:
    """
    Logs on, retrying every ``retry_s`` seconds for as long as it takes.

    After a successful logon the loop waits ``settle_s`` seconds for the
    session to propagate before it reports ``CONNECTED`` and calls
    ``on_connected``.
    """

    def __init__(
        self,
        client: ConversationClient,
        timers: TimerService,
        on_connected: Callable[[str], None] | None = None,
        retry_s: float = 2.0,
        settle_s: float = 5.0,
    ):
        self._client = client
        self._timers = timers
        self._on_connected = on_connected
        self._retry_s = retry_s
        self._settle_s = settle_s
        self._state = LogonState.DISCONNECTED
        self._retry_timer: Any = None
        self._user: str | None = None
        self.attempts = 0

    @property
    def state(self) -> LogonState:
        return self._state

    @property
    def connected(self) -> bool:
        return self._state is LogonState.CONNECTED

    @property
    def user(self) -> str | None:
        return self._user

    def start(self) -> None:
        if self._state is not LogonState.DISCONNECTED:
            return
        self._state = LogonState.CONNECTING
        self._attempt()

    def _attempt(self) -> None:
        self._retry_timer = None
        self.attempts += 1
        try:
            user = self._client.logon()
        except ConnectionFailure as e:
            logger.error(
                "Error logging on bot",
                extra={"attempt": self.attempts, "error": str(e)},
            )
            self._retry_timer = self._timers.call_later(self._retry_s, self._attempt)
            return

        logger.info("Bot logged on", extra={"user": user, "attempt": self.attempts})
        self._user = user
        self._timers.call_later(self._settle_s, self._settled)

    def _settled(self) -> None:
        self._state = LogonState.CONNECTED
        logger.info("Bot connected", extra={"user": self._user})
        if self._on_connected is not None:
            self._on_connected(self._user)
