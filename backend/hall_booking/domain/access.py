from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..models import UserRole
from .entities import BookingRecord, CurrentUser, HallInfo
from .errors import UnauthorizedError


@dataclass(frozen=True)
class BookingScope:
    """Which bookings a caller may see: own (customer), own halls (owner) or all (admin)."""

    role: UserRole
    user_id: int
    hall_id: Optional[int] = None

    @classmethod
    def for_user(cls, user: CurrentUser, *, hall_id: Optional[int] = None) -> "BookingScope":
        return cls(role=user.role, user_id=user.id, hall_id=hall_id)


def can_view(user: CurrentUser, booking: BookingRecord, hall: Optional[HallInfo]) -> bool:
    if user.role == UserRole.ADMIN:
        return True
    if user.role == UserRole.OWNER:
        return hall is not None and hall.owner_id == user.id
    return booking.customer_id == user.id


def ensure_can_cancel(user: CurrentUser, booking: BookingRecord, hall: Optional[HallInfo]) -> None:
    # The owning customer, the hall's owner and any admin may cancel.
    if not can_view(user, booking, hall):
        raise UnauthorizedError("not allowed to cancel this booking")
