## errors.py


class AutoLogError(Exception):
    """Base class for failures raised while producing a logging proposal."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def __str__(self):
        return self.message


class EmptyResponse(AutoLogError):
    """The chat API answered without any content."""


class TransportFailure(AutoLogError):
    """Network, authentication, quota or protocol error talking to the chat API."""

    def __init__(self, message: str, status: int | None = None):
        self.status = status
        super().__init__(message)


class ValidationRejected(AutoLogError):
    """The model changed more than logging lines, even after the corrective retry."""


class AutoLogCancelled(AutoLogError):
    """The caller asked to stop; a late reply was dropped."""


class InvalidLogLevel(AutoLogError, ValueError):
    """Requested log level is not one of debug/info/warning/error/critical."""
