class TimeTrackingError(Exception):
    """Base exception for the time tracking service."""

    status_code = 500

    def __init__(self, message: str = "An internal error occurred."):
        super().__init__(message)
        self.message = message


class ValidationFailure(TimeTrackingError):
    """Raised when request fields are missing or invalid. User-correctable."""

    status_code = 400


class NotFound(TimeTrackingError):
    """Raised when a referenced entry or staff member does not exist."""

    status_code = 404


class StoreUnavailable(TimeTrackingError):
    """Raised when the document store is not configured or cannot be reached."""

    status_code = 500
    public_message = "Time tracking store unavailable"


class WriteFailure(StoreUnavailable):
    """Raised when a time entry could not be persisted."""

    public_message = "Failed to record time entry"


class DegradedRead(TimeTrackingError):
    """Raised by the store when an ordered query cannot be served yet.

    Callers substitute their documented default instead of surfacing it.
    """
