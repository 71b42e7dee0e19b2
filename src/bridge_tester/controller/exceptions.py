"""Custom exceptions for the controller process."""


class ConnectionFailure(Exception):
    """Raised when logging on to the conversation platform fails."""

    def __init__(self, cause: Exception | None = None):
        self.cause = cause
        super().__init__(f"Failed to log on: {cause}")


class ConversationError(Exception):
    """Raised when a conversation platform request fails."""

    def __init__(self, operation: str, cause: Exception | None = None):
        self.operation = operation
        self.cause = cause
        super().__init__(f"Conversation {operation} failed: {cause}")


class ConfigurationValidationError(Exception):
    """Raised when a test configuration input is rejected."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid test configuration: {reason}")


class NoBridgesConfigured(Exception):
    """Raised when a bridge is needed but none is available."""

    def __init__(self, reason: str = "There are no bridges configured"):
        self.reason = reason
        super().__init__(reason)


class NoEligibleBridges(Exception):
    """Raised when bridges are configured but none may be tested in the current mode."""

    def __init__(self, mode: str, locale: str):
        self.mode = mode
        self.locale = locale
        super().__init__(f"No {locale} bridges configured for mode {mode}")


class UnsupportedLocale(Exception):
    """Raised when no reference phrase is registered for a locale."""

    def __init__(self, locale: str):
        self.locale = locale
        super().__init__(f"{locale} is an invalid or not supported locale")


class WorkerNotReady(Exception):
    """Raised when a transcription is requested with no worker connected."""

    def __init__(self, cause: Exception | None = None):
        self.cause = cause
        super().__init__("Transcriber process is not ready")


class CycleInProgress(Exception):
    """Raised when a test cycle is requested while another is in flight."""

    def __init__(self, bridge_number: str):
        self.bridge_number = bridge_number
        super().__init__(f"A test call to {bridge_number} is still in progress")


class CallTimedOut(Exception):
    """Raised when a test cycle waits too long in one state."""

    def __init__(self, state: str, timeout_s: float):
        self.state = state
        self.timeout_s = timeout_s
        super().__init__(f"Test call timed out after {timeout_s:g}s in {state}")


class TranscodingError(Exception):
    """Raised when converting a recording for transcription fails."""

    def __init__(self, file_name: str, cause: Exception | None = None):
        self.file_name = file_name
        self.cause = cause
        super().__init__(f"Failed to transcode recording '{file_name}'")


class ShutdownRequested(SystemExit):
    """Raised by the shutdown command to terminate the controller."""

    def __init__(self, reason: str | None = None):
        self.reason = reason
        super().__init__(f"Terminated by user: {reason or 'shutdown'}")
