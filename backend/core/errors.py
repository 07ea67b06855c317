"""Domain errors.

Request-level errors carry an HTTP status and are translated by the exception
handler registered in ``main.py``. Side-effect errors (mail delivery, counter
updates, pre-update lookups) are caught where they occur and only logged.
"""


class DomainError(Exception):
    """Base class for all errors raised by services."""

    status_code: int = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.__class__.__name__


class ValidationError(DomainError):
    """A required field is missing or a value is not acceptable."""

    status_code = 400


class NotFoundError(DomainError):
    """The requested resource, file or subscriber does not exist."""

    status_code = 404


class ForbiddenError(DomainError):
    """The resource exists but is not in a state that allows the operation."""

    status_code = 403


class UpstreamDeliveryError(DomainError):
    """The mail transport rejected a message."""

    status_code = 502

    def __init__(self, recipient: str, reason: str):
        super().__init__(f"Delivery to {recipient} failed: {reason}")
        self.recipient = recipient
        self.reason = reason


class CounterUpdateError(DomainError):
    """The atomic download-count increment failed."""


class TransitionLookupError(DomainError):
    """The pre-update publication state could not be read."""
