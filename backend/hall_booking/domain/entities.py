from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..models import UserRole


@dataclass(frozen=True)
class CustomerIdentity:
    first_name: str
    last_name: str
    phone: str


@dataclass(frozen=True)
class BookingDraft:
    """A booking that passed intake validation but has no id yet."""

    hall_id: int
    booking_date: date
    guest_count: int
    customer: CustomerIdentity
    customer_id: int


@dataclass(frozen=True)
class BookingRecord:
    id: int
    hall_id: int
    booking_date: date
    guest_count: int
    customer: CustomerIdentity
    customer_id: int


@dataclass(frozen=True)
class HallInfo:
    id: int
    name: str
    district: str
    capacity: int
    price_per_guest: Decimal
    approved: bool
    owner_id: Optional[int] = None


@dataclass(frozen=True)
class CurrentUser:
    id: int
    role: UserRole


def is_bookable(hall: HallInfo) -> bool:
    """Customer-facing flows may only book approved halls."""
    return hall.approved


def total_price(record: BookingRecord, hall: HallInfo) -> Decimal:
    return Decimal(record.guest_count) * hall.price_per_guest
