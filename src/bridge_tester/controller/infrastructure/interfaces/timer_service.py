"""Abstract interface for timers on the controller event loop."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any


class TimerService(ABC):
    """Schedules callbacks on the same thread that runs the bus handlers."""

    @abstractmethod
    def call_later(self, delay_s: float, callback: Callable[[], None]) -> Any:
        """Runs ``callback`` once after ``delay_s`` seconds and returns a handle."""
        pass

    @abstractmethod
    def cancel(self, handle: Any) -> None:
        """Cancels a pending callback; cancelling a fired handle is a no-op."""
        pass
