from __future__ import annotations

from typing import Mapping


class BookingError(Exception):
    """Base class for booking engine failures surfaced at the API boundary."""

    code = "booking_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ShapeInvalidError(BookingError):
    code = "shape_invalid"

    def __init__(self, fields: Mapping[str, str]) -> None:
        self.fields = dict(fields)
        super().__init__("invalid fields: " + ", ".join(sorted(self.fields)))


class CapacityExceededError(BookingError):
    code = "capacity_exceeded"


class DateUnavailableError(BookingError):
    code = "date_unavailable"


class UnauthorizedError(BookingError):
    code = "unauthorized"


class NotFoundError(BookingError):
    code = "not_found"


class ConflictError(BookingError):
    """Raised by the ledger when a (hall, date) pair is already held."""

    code = "conflict"


class PersistenceUnavailableError(BookingError):
    code = "persistence_unavailable"
