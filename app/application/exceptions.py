class PayloadValidationError(ValueError):
    """Raised when a request payload is missing required fields or is inconsistent."""

    def __init__(self, details: str, error: str = "Missing required fields") -> None:
        super().__init__(details)
        self.details = details
        self.error = error


class UpstreamDeliveryError(RuntimeError):
    """Raised when the email provider rejects a message, times out or is unreachable."""
    pass


class StoreFetchError(RuntimeError):
    """Raised when the data store cannot be queried (network errors, query errors)."""
    pass


class StoreWriteError(RuntimeError):
    """Raised when an insert, update or delete against the data store fails."""
    pass


class BookingNotFoundError(LookupError):
    """Raised when a booking id does not exist in the data store."""
    pass


class MalformedTimeError(ValueError):
    """Raised when an appointment time does not match the 12-hour 'h:mm AM|PM' format."""
    pass
