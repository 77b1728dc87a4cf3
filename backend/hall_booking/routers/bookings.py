from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import get_current_user, get_session
from ..domain.access import BookingScope
from ..domain.entities import CurrentUser
from ..domain.errors import BookingError
from ..domain.filters import BookingFilter
from ..domain.ledger import BookingLedger
from ..domain.status import BookingStatus, classify
from ..infrastructure.repositories import SqlAlchemyBookingStore, SqlAlchemyHallCatalog
from ..schemas import BookingCreate, BookingRead
from ..usecases import bookings as booking_usecase
from ..utils.audit_log import emit_audit_log
from ..utils.time import business_today
from .errors import to_http_error

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.post("", response_model=BookingRead, status_code=status.HTTP_201_CREATED)
async def create_booking(
    payload: BookingCreate,
    session: AsyncSession = Depends(get_session),
    user: CurrentUser = Depends(get_current_user),
) -> BookingRead:
    ledger = BookingLedger(SqlAlchemyBookingStore(session))
    catalog = SqlAlchemyHallCatalog(session)
    today = business_today()
    async with session.begin():
        try:
            booking, hall = await booking_usecase.create_booking(
                ledger,
                catalog,
                hall_id=payload.hall_id,
                booking_date=payload.booking_date,
                guest_count=payload.guest_count,
                first_name=payload.first_name,
                last_name=payload.last_name,
                phone=payload.phone,
                requesting_user=user,
                today=today,
            )
        except BookingError as exc:
            raise to_http_error(exc)

    try:
        emit_audit_log(
            action="booking.created",
            initiator=user.role.value,
            booking_id=booking.id,
            hall_id=booking.hall_id,
            actor_id=user.id,
            customer_id=booking.customer_id,
            booking_date=booking.booking_date,
            guest_count=booking.guest_count,
            status=classify(booking.booking_date, today),
        )
    except RuntimeError:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="audit log failed")

    return BookingRead.from_domain(booking=booking, hall=hall, today=today)


@router.delete("/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_booking(
    booking_id: int = Path(..., ge=1),
    session: AsyncSession = Depends(get_session),
    user: CurrentUser = Depends(get_current_user),
) -> Response:
    ledger = BookingLedger(SqlAlchemyBookingStore(session))
    catalog = SqlAlchemyHallCatalog(session)
    async with session.begin():
        try:
            removed, _ = await booking_usecase.cancel_booking(
                ledger,
                catalog,
                booking_id=booking_id,
                requesting_user=user,
            )
        except BookingError as exc:
            raise to_http_error(exc)

    try:
        emit_audit_log(
            action="booking.cancelled",
            initiator=user.role.value,
            booking_id=removed.id,
            hall_id=removed.hall_id,
            actor_id=user.id,
            customer_id=removed.customer_id,
            booking_date=removed.booking_date,
            guest_count=removed.guest_count,
            status=classify(removed.booking_date, business_today()),
        )
    except RuntimeError:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="audit log failed")

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("", response_model=List[BookingRead])
async def list_bookings(
    hall_id: Optional[int] = Query(default=None, ge=1),
    district: Optional[str] = Query(default=None),
    status_filter: Optional[BookingStatus] = Query(default=None, alias="status"),
    session: AsyncSession = Depends(get_session),
    user: CurrentUser = Depends(get_current_user),
) -> list[BookingRead]:
    ledger = BookingLedger(SqlAlchemyBookingStore(session))
    catalog = SqlAlchemyHallCatalog(session)
    today = business_today()
    try:
        entries = await booking_usecase.list_bookings(
            ledger,
            catalog,
            scope=BookingScope.for_user(user),
            filters=BookingFilter(hall_id=hall_id, district=district, status=status_filter),
            today=today,
        )
    except BookingError as exc:
        raise to_http_error(exc)
    return [
        BookingRead.from_domain(booking=entry.booking, hall=entry.hall, status=entry.status, today=today)
        for entry in entries
    ]
