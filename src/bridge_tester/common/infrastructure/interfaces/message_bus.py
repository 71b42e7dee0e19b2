"""Abstract interfaces for the controller/peer message bus."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel

from bridge_tester.common.messages import MessageName, PeerRole

MessageHandler = Callable[[Any], None]


class PeerHandle(BaseModel, frozen=True):
    """Opaque address of the single peer registered for a role."""

    role: PeerRole
    address: str


class MessageBus(ABC):
    """Controller side of the bus: one registered peer per role."""

    @abstractmethod
    def register_peer(self, role: PeerRole, address: str) -> PeerHandle:
        """
        Stores the handle of a peer that announced readiness.

        A later registration for the same role replaces the earlier one.

        Args:
            role: The role the peer registers under.
            address: Where messages for the peer are delivered.

        Returns:
            The stored handle.
        """
        pass

    @abstractmethod
    def is_connected(self, role: PeerRole) -> bool:
        """Returns whether a handle is registered for the role."""
        pass

    @abstractmethod
    def send(self, role: PeerRole, name: MessageName, payload: BaseModel) -> None:
        """
        Delivers a message to the peer registered for a role, fire-and-forget.

        Args:
            role: Target peer role.
            name: The message name.
            payload: The typed message payload.

        Raises:
            PeerNotConnected: If no peer is registered, or its address is gone.
            EventPublishError: If publishing fails for any other reason.
        """
        pass

    @abstractmethod
    def on_message(self, name: MessageName, handler: MessageHandler) -> None:
        """
        Registers a handler called with the typed payload of every message
        carrying ``name``. Handlers run one at a time, in arrival order.
        """
        pass

    @abstractmethod
    def consume(self) -> None:
        """Runs the event loop, dispatching messages until the connection closes."""
        pass


class PeerBus(ABC):
    """Peer side of the bus: talks to the single controller."""

    @abstractmethod
    def announce_ready(self, role: PeerRole) -> None:
        """Sends ``peer-ready`` so the controller stores this peer's handle."""
        pass

    @abstractmethod
    def emit(self, name: MessageName, payload: BaseModel) -> None:
        """
        Publishes a message to the controller.

        Raises:
            EventPublishError: If publishing fails.
        """
        pass

    @abstractmethod
    def on_message(self, name: MessageName, handler: MessageHandler) -> None:
        """Registers a handler for messages the controller sends to this peer."""
        pass

    @abstractmethod
    def call_threadsafe(self, callback: Callable[[], None]) -> None:
        """Schedules ``callback`` on the bus thread from any other thread."""
        pass

    @abstractmethod
    def consume(self) -> None:
        """Runs the event loop, dispatching messages until the connection closes."""
        pass
