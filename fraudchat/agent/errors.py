"""Errors raised by the assistant layer."""


class AssistantError(Exception):
    """Base class for assistant failures."""


class ConfigurationMissingError(AssistantError):
    """Raised when no API key is configured."""


class RemoteCallError(AssistantError):
    """Raised when a remote call fails or returns a non-success status.

    Attributes:
        action: What was being attempted (e.g. "create assistant").
        status_code: HTTP status, or None for transport failures.
        detail: Response body or transport error text.
    """

    def __init__(self, action: str, status_code: int | None = None, detail: str = "") -> None:
        message = f"Failed to {action}"
        if status_code is not None:
            message += f": {status_code}"
        super().__init__(message)
        self.action = action
        self.status_code = status_code
        self.detail = detail


class ResponseTimeoutError(RemoteCallError):
    """Raised when no assistant reply arrives within the retry policy."""

    def __init__(self, attempts: int) -> None:
        super().__init__("get assistant reply", detail=f"no reply after {attempts} polls")
        self.attempts = attempts


class PollCancelledError(AssistantError):
    """Raised when a reply wait is cancelled by the caller."""
