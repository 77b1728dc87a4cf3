from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Iterable, List, Mapping, Optional

from .entities import BookingRecord, HallInfo
from .status import BookingStatus, classify


@dataclass(frozen=True)
class BookingFilter:
    hall_id: Optional[int] = None
    district: Optional[str] = None
    status: Optional[BookingStatus] = None

    def merged(self, other: "BookingFilter") -> "BookingFilter":
        """Overlay the predicates set on `other` onto this filter."""
        return replace(
            self,
            hall_id=other.hall_id if other.hall_id is not None else self.hall_id,
            district=other.district if other.district is not None else self.district,
            status=other.status if other.status is not None else self.status,
        )


@dataclass(frozen=True)
class BookingEntry:
    booking: BookingRecord
    status: BookingStatus
    hall: Optional[HallInfo]


def apply_filters(
    bookings: Iterable[BookingRecord],
    filters: BookingFilter,
    halls: Mapping[int, HallInfo],
    today: date,
) -> List[BookingEntry]:
    """
    Classify, filter (AND of all set predicates) and sort ascending by date.
    Ties on the same date are broken by booking id.
    """
    entries: List[BookingEntry] = []
    for booking in bookings:
        if filters.hall_id is not None and booking.hall_id != filters.hall_id:
            continue
        hall = halls.get(booking.hall_id)
        if filters.district is not None and (hall is None or hall.district != filters.district):
            continue
        status = classify(booking.booking_date, today)
        if filters.status is not None and status != filters.status:
            continue
        entries.append(BookingEntry(booking=booking, status=status, hall=hall))
    entries.sort(key=lambda e: (e.booking.booking_date, e.booking.id))
    return entries


class BookingBoard:
    """Role-scoped booking set with sticky filters; resetting never refetches."""

    def __init__(self, bookings: Iterable[BookingRecord], halls: Mapping[int, HallInfo]) -> None:
        self._bookings = list(bookings)
        self._halls = dict(halls)
        self.filters = BookingFilter()

    def set_filters(self, filters: BookingFilter, *, today: date) -> List[BookingEntry]:
        self.filters = self.filters.merged(filters)
        return apply_filters(self._bookings, self.filters, self._halls, today)

    def reset_filters(self, *, today: date) -> List[BookingEntry]:
        self.filters = BookingFilter()
        return apply_filters(self._bookings, self.filters, self._halls, today)
