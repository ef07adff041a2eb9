"""
Waitlist error taxonomy
"""


class WaitlistError(Exception):
    code = "WAITLIST_ERROR"

    def __init__(self, message: str | None = None, code: str | None = None) -> None:
        if code:
            self.code = code
        self.message = message or self.code
        super().__init__(self.message)


class ValidationError(WaitlistError):
    """A required field is missing or malformed. Raised before any storage I/O."""
    code = "INVALID_REQUEST"


class NotFoundError(WaitlistError):
    """Attendee is not on the waitlist.

    The store reports this as a negative result; only the HTTP layer raises it.
    """
    code = "NOT_FOUND"


class PersistenceUnavailable(WaitlistError):
    """Backing store rejected a write or is not configured for writing."""
    code = "PERSISTENCE_UNAVAILABLE"


class UnexpectedBackendError(PersistenceUnavailable):
    """Backing store answered with something that could not be decoded."""
    code = "UNEXPECTED_BACKEND_ERROR"
