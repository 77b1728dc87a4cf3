import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Optional

from .availability import AvailabilityIndex
from .entities import BookingDraft, CustomerIdentity, HallInfo
from .errors import CapacityExceededError, DateUnavailableError, ShapeInvalidError

NAME_MIN_LENGTH = 2
PHONE_PATTERN = re.compile(r"^\+?\d[\d\s\-()]{5,18}\d$")
PHONE_MIN_DIGITS = 7
PHONE_MAX_DIGITS = 15


@dataclass(frozen=True)
class BookingRequest:
    """Raw intake values as received from the caller, before normalization."""

    hall_id: int
    booking_date: Any
    guest_count: Any
    first_name: Optional[str]
    last_name: Optional[str]
    phone: Optional[str]


def _parse_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return None
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


def _valid_phone(phone: str) -> bool:
    if not PHONE_PATTERN.match(phone):
        return False
    digits = sum(ch.isdigit() for ch in phone)
    return PHONE_MIN_DIGITS <= digits <= PHONE_MAX_DIGITS


def validate_shape(request: BookingRequest, *, customer_id: int) -> BookingDraft:
    """
    Normalize raw intake values into a draft. Collects every offending field
    before raising ShapeInvalidError so the caller can fix them in one pass.
    """
    errors: Dict[str, str] = {}

    first_name = (request.first_name or "").strip()
    if len(first_name) < NAME_MIN_LENGTH:
        errors["first_name"] = f"must be at least {NAME_MIN_LENGTH} characters"
    last_name = (request.last_name or "").strip()
    if len(last_name) < NAME_MIN_LENGTH:
        errors["last_name"] = f"must be at least {NAME_MIN_LENGTH} characters"

    phone = (request.phone or "").strip()
    if not _valid_phone(phone):
        errors["phone"] = "invalid phone number"

    guest_count = request.guest_count
    if isinstance(guest_count, bool) or not isinstance(guest_count, int) or guest_count < 1:
        errors["guest_count"] = "must be a positive integer"

    booking_date = _parse_date(request.booking_date)
    if booking_date is None:
        errors["booking_date"] = "must be a date in YYYY-MM-DD format"

    if errors or booking_date is None:
        raise ShapeInvalidError(errors)
    return BookingDraft(
        hall_id=request.hall_id,
        booking_date=booking_date,
        guest_count=guest_count,
        customer=CustomerIdentity(first_name=first_name, last_name=last_name, phone=phone),
        customer_id=customer_id,
    )


def validate_booking(draft: BookingDraft, hall: HallInfo, index: AvailabilityIndex, *, today: date) -> None:
    """
    Business rules after shape: capacity first, then availability.
    Over-capacity counts are rejected, never clamped.
    """
    if draft.guest_count > hall.capacity:
        raise CapacityExceededError(f"guest_count {draft.guest_count} exceeds hall capacity {hall.capacity}")
    if not index.is_available(hall.id, draft.booking_date, today):
        if draft.booking_date < today:
            raise DateUnavailableError("date is in the past")
        raise DateUnavailableError("date is already booked")
