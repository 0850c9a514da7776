class UpstreamServiceError(RuntimeError):
    """Raised when the recommender or the booking store fails (network errors, bad responses, IO)."""
    pass


class SlotAlreadyBookedError(RuntimeError):
    """Raised when a write would create a second live booking for the same consultant, date and slot."""
    pass
