from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import get_current_user, get_session
from ..domain.access import can_view
from ..domain.entities import CurrentUser
from ..domain.errors import BookingError
from ..domain.ledger import BookingLedger
from ..infrastructure.repositories import SqlAlchemyBookingStore, SqlAlchemyHallCatalog
from ..schemas import AvailabilityRead, BookingRead, CalendarDayRead
from ..usecases import bookings as booking_usecase
from ..utils.time import business_today
from .errors import to_http_error

MAX_CALENDAR_DAYS = 366

router = APIRouter(prefix="/halls", tags=["halls"], dependencies=[Depends(get_current_user)])


@router.get("/{hall_id}/availability", response_model=AvailabilityRead)
async def check_availability(
    hall_id: int = Path(..., ge=1),
    day: date = Query(..., alias="date", description="Calendar date (YYYY-MM-DD)"),
    session: AsyncSession = Depends(get_session),
) -> AvailabilityRead:
    ledger = BookingLedger(SqlAlchemyBookingStore(session))
    catalog = SqlAlchemyHallCatalog(session)
    try:
        available = await booking_usecase.check_availability(
            ledger, catalog, hall_id=hall_id, day=day, today=business_today()
        )
    except BookingError as exc:
        raise to_http_error(exc)
    booked = ledger.index.booking_on(hall_id, day) is not None
    return AvailabilityRead(hall_id=hall_id, day=day, available=available, booked=booked)


@router.get("/{hall_id}/calendar", response_model=List[CalendarDayRead])
async def hall_calendar(
    hall_id: int = Path(..., ge=1),
    start: date = Query(...),
    end: date = Query(...),
    session: AsyncSession = Depends(get_session),
) -> list[CalendarDayRead]:
    if start > end:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="start must not be later than end")
    if (end - start).days + 1 > MAX_CALENDAR_DAYS:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="range too long")
    ledger = BookingLedger(SqlAlchemyBookingStore(session))
    catalog = SqlAlchemyHallCatalog(session)
    try:
        days = await booking_usecase.hall_calendar(
            ledger,
            catalog,
            hall_id=hall_id,
            start=start,
            end=end,
            today=business_today(),
        )
    except BookingError as exc:
        raise to_http_error(exc)
    return [CalendarDayRead.from_domain(day) for day in days]


@router.get("/{hall_id}/bookings/{day}", response_model=BookingRead)
async def get_booking_on(
    hall_id: int = Path(..., ge=1),
    day: date = Path(...),
    session: AsyncSession = Depends(get_session),
    user: CurrentUser = Depends(get_current_user),
) -> BookingRead:
    ledger = BookingLedger(SqlAlchemyBookingStore(session))
    catalog = SqlAlchemyHallCatalog(session)
    try:
        booking, hall = await booking_usecase.get_booking_on(ledger, catalog, hall_id=hall_id, day=day)
    except BookingError as exc:
        raise to_http_error(exc)
    if booking is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "not_found", "message": "no booking on this date"},
        )
    if not can_view(user, booking, hall):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"error": "unauthorized", "message": "not allowed to view this booking"},
        )
    return BookingRead.from_domain(booking=booking, hall=hall, today=business_today())
