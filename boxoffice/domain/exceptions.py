

class BoxOfficeError(Exception):
    """
    Base exception for all domain-level errors
    inside the box office booking core.
    """


class InvalidStateTransitionError(BoxOfficeError):
    """
    Raised when an illegal order state transition is attempted.
    """

    def __init__(self, from_state: str, to_state: str):
        self.from_state = from_state
        self.to_state = to_state

        message = (
            f"Illegal state transition attempted: "
            f"{from_state} -> {to_state}"
        )
        super().__init__(message)


class InvalidRequestError(BoxOfficeError):
    """Raised when a request is malformed. Never retried without fixing input."""


class SeatConflictError(BoxOfficeError):
    """
    Raised when a requested seat is already claimed by an active order.
    """

    def __init__(self, session_id: int, row: int, col: int):
        self.session_id = session_id
        self.row = row
        self.col = col

        message = f"Seat already taken: session {session_id} r{row}c{col}"
        super().__init__(message)


class NotFoundError(BoxOfficeError):
    """Raised on a read miss."""


class StoreUnavailableError(BoxOfficeError):
    """
    Raised when the underlying store fails.
    The message is safe to show to callers; the cause is chained.
    """

    def __init__(self, message: str = "Booking store is unavailable, please retry"):
        super().__init__(message)
