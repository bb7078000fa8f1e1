class TravelBookingError(Exception):
    """Base class for errors raised by the booking services."""

    def __init__(self, message: str, **extra):
        super().__init__(message)
        self.message = message
        # Extra keys merged into the error body, e.g. success=False
        self.extra = extra


class NotFound(TravelBookingError):
    """An identifier does not resolve in the targeted collection."""


class InvalidInput(TravelBookingError):
    """Required fields are missing or malformed."""


class Conflict(TravelBookingError):
    """The record would duplicate an existing key (email, username, trip id)."""


class AuthenticationFailed(TravelBookingError):
    pass


class StorageFault(TravelBookingError):
    """
    A document could not be read or written.
    Caught inside the document store and logged; never returned to a client.
    """
