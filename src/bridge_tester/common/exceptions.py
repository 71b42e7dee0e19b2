"""Exceptions shared by the controller and its peers."""


class PeerNotConnected(Exception):
    """Raised when a message is sent to a role with no connected peer."""

    def __init__(self, role: str, cause: Exception | None = None):
        self.role = role
        self.cause = cause
        super().__init__(f"No {role} peer is connected")


class EventPublishError(Exception):
    """Raised when publishing a message to the bus fails."""

    def __init__(self, message_name: str, cause: Exception | None = None):
        self.message_name = message_name
        self.cause = cause
        super().__init__(f"Failed to publish message '{message_name}'")
