from datetime import date
from enum import StrEnum


class BookingStatus(StrEnum):
    UPCOMING = "upcoming"
    PAST = "past"


def classify(booking_date: date, today: date) -> BookingStatus:
    """
    Derive the lifecycle status of a booking from its calendar date.
    A booking dated today stays upcoming for the whole day. Never persist the result.
    """
    if booking_date >= today:
        return BookingStatus.UPCOMING
    return BookingStatus.PAST
