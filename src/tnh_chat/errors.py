"""Error types raised by the chat pipeline and the HTTP layer."""

from typing import Optional


class ServiceError(Exception):
    """Base class for errors that map onto an HTTP error envelope.

    ``public_message`` is what the caller sees; the exception message
    itself may carry more detail for the logs.
    """

    status_code = 500
    public_message = "Server error"

    def __init__(self, public_message: Optional[str] = None, message: Optional[str] = None):
        self.public_message = public_message or type(self).public_message
        super().__init__(message or self.public_message)


class ValidationError(ServiceError):
    """The request body is missing a usable message."""

    status_code = 400
    public_message = "Invalid message"


class AuthError(ServiceError):
    """The bearer token does not match the configured service key."""

    status_code = 401
    public_message = "Unauthorised"


class UpstreamError(ServiceError):
    """A model or vector-store call failed.

    The original exception is kept as ``__cause__``; only non-production
    responses expose it.
    """

    def __init__(self, stage: str, message: Optional[str] = None):
        super().__init__(message=message or f"{stage} failed")
        self.stage = stage
