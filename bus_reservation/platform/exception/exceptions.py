class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    def __init__(self, message: str, status_code: int = 500) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DomainError(CustomBaseError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class ForbiddenError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 403)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ConflictError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class AuthenticationError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 401)


class LoginError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


# ========== Reservation errors ==========


class InvalidInputError(DomainError):
    """Malformed or missing required field; the caller may retry with corrected input."""

    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


class SeatOutOfRangeError(InvalidInputError):
    def __init__(self, *, seat_number: int, total_seats: int) -> None:
        self.seat_number = seat_number
        self.total_seats = total_seats
        super().__init__(f'Seat {seat_number} is out of range (1-{total_seats})')


class BusNotFoundError(NotFoundError):
    def __init__(self, message: str = 'Bus not found') -> None:
        super().__init__(message)


class BookingNotFoundError(NotFoundError):
    def __init__(self, message: str = 'Booking not found') -> None:
        super().__init__(message)


class UserNotFoundError(NotFoundError):
    def __init__(self, message: str = 'User not found') -> None:
        super().__init__(message)


class RouteNotFoundError(NotFoundError):
    def __init__(self, message: str = 'Route not found') -> None:
        super().__init__(message)


class ScheduleNotFoundError(NotFoundError):
    def __init__(self, message: str = 'Schedule not found') -> None:
        super().__init__(message)


class SeatUnavailableError(ConflictError):
    def __init__(self, message: str = 'Seat is not available') -> None:
        super().__init__(message)


class SeatNotOccupiedError(ConflictError):
    def __init__(self, message: str = 'Seat is not occupied') -> None:
        super().__init__(message)


class SeatNotBlockedError(ConflictError):
    def __init__(self, message: str = 'Seat is not blocked') -> None:
        super().__init__(message)


class AlreadyCancelledError(ConflictError):
    def __init__(self, message: str = 'Booking already cancelled') -> None:
        super().__init__(message)


class AlreadyCompletedError(ConflictError):
    def __init__(self, message: str = 'Booking already completed') -> None:
        super().__init__(message)


class NotOwnerError(ForbiddenError):
    def __init__(self, message: str = 'Only the booking owner can perform this action') -> None:
        super().__init__(message)


class StorageFailureError(CustomBaseError):
    def __init__(self, message: str = 'Storage is unavailable, please retry later') -> None:
        super().__init__(message, 503)
