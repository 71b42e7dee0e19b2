"""Timers on the pika blocking connection that runs the controller bus."""

from collections.abc import Callable
from typing import Any

from pika import BlockingConnection

from .interfaces import TimerService


class PikaTimerService(TimerService):
    """Fires callbacks from inside ``start_consuming``, between message handlers."""

    def __init__(self, connection: BlockingConnection):
        self._connection = connection

    def call_later(self, delay_s: float, callback: Callable[[], None]) -> Any:
        return self._connection.call_later(delay_s, callback)

    def cancel(self, handle: Any) -> None:
        self._connection.remove_timeout(handle)
