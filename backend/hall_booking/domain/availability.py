from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from enum import StrEnum
from typing import Dict, Iterable, List, Optional, Tuple

from .entities import BookingRecord


class DayState(StrEnum):
    AVAILABLE = "available"
    BOOKED = "booked"
    PAST = "past"


@dataclass(frozen=True)
class DayAvailability:
    day: date
    state: DayState


class AvailabilityIndex:
    """(hall_id, date) -> booking lookup, rebuilt wholesale from ledger records."""

    def __init__(self, records: Iterable[BookingRecord] = ()) -> None:
        self._by_day: Dict[Tuple[int, date], BookingRecord] = {}
        self.rebuild(records)

    def rebuild(self, records: Iterable[BookingRecord]) -> None:
        by_day: Dict[Tuple[int, date], BookingRecord] = {}
        for record in records:
            by_day[(record.hall_id, record.booking_date)] = record
        self._by_day = by_day

    def __len__(self) -> int:
        return len(self._by_day)

    def booking_on(self, hall_id: int, day: date) -> Optional[BookingRecord]:
        return self._by_day.get((hall_id, day))

    def is_available(self, hall_id: int, day: date, today: date) -> bool:
        # Past dates are never bookable, even when empty.
        if day < today:
            return False
        return (hall_id, day) not in self._by_day

    def day_state(self, hall_id: int, day: date, today: date) -> DayState:
        if day < today:
            return DayState.PAST
        if (hall_id, day) in self._by_day:
            return DayState.BOOKED
        return DayState.AVAILABLE

    def calendar(self, hall_id: int, start: date, end: date, today: date) -> List[DayAvailability]:
        if start > end:
            raise ValueError("start must not be later than end")
        days: List[DayAvailability] = []
        current = start
        while current <= end:
            days.append(DayAvailability(day=current, state=self.day_state(hall_id, current, today)))
            current += timedelta(days=1)
        return days
