from datetime import date
from decimal import Decimal
from typing import Optional, Union

from pydantic import BaseModel, Field, field_serializer

from .domain.availability import DayAvailability, DayState
from .domain.entities import BookingRecord, HallInfo, total_price
from .domain.status import BookingStatus, classify


class BookingCreate(BaseModel):
    # Shape rules are enforced by the intake validator, not here.
    hall_id: int
    booking_date: Optional[Union[date, str]] = Field(default=None, alias="date")
    guest_count: Optional[int] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None

    model_config = {"populate_by_name": True}


class BookingRead(BaseModel):
    booking_id: int
    hall_id: int
    hall_name: Optional[str] = None
    booking_date: date
    guest_count: int
    first_name: str
    last_name: str
    phone: str
    customer_id: int
    status: BookingStatus
    total_price: Optional[Decimal] = None

    @field_serializer("total_price")
    def _ser_price(self, value: Optional[Decimal]) -> Optional[str]:
        return None if value is None else f"{value:.2f}"

    @classmethod
    def from_domain(
        cls,
        *,
        booking: BookingRecord,
        today: date,
        hall: Optional[HallInfo] = None,
        status: Optional[BookingStatus] = None,
    ) -> "BookingRead":
        return cls(
            booking_id=booking.id,
            hall_id=booking.hall_id,
            hall_name=hall.name if hall is not None else None,
            booking_date=booking.booking_date,
            guest_count=booking.guest_count,
            first_name=booking.customer.first_name,
            last_name=booking.customer.last_name,
            phone=booking.customer.phone,
            customer_id=booking.customer_id,
            status=status or classify(booking.booking_date, today),
            total_price=total_price(booking, hall) if hall is not None else None,
        )


class AvailabilityRead(BaseModel):
    hall_id: int
    day: date
    available: bool
    booked: bool


class CalendarDayRead(BaseModel):
    day: date
    state: DayState

    @classmethod
    def from_domain(cls, day: DayAvailability) -> "CalendarDayRead":
        return cls(day=day.day, state=day.state)
