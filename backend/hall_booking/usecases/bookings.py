from datetime import date
from typing import Any, List, Optional

from ..domain.access import BookingScope, ensure_can_cancel
from ..domain.availability import DayAvailability
from ..domain.entities import BookingRecord, CurrentUser, HallInfo, is_bookable
from ..domain.errors import ConflictError, DateUnavailableError, NotFoundError, UnauthorizedError
from ..domain.filters import BookingEntry, BookingFilter, apply_filters
from ..domain.ledger import BookingLedger
from ..domain.repositories import HallCatalog
from ..domain.services import BookingRequest, validate_booking, validate_shape
from ..models import UserRole


async def _require_hall(catalog: HallCatalog, hall_id: int) -> HallInfo:
    hall = await catalog.get_hall(hall_id)
    if hall is None:
        raise NotFoundError("hall not found")
    return hall


async def check_availability(
    ledger: BookingLedger,
    catalog: HallCatalog,
    *,
    hall_id: int,
    day: date,
    today: date,
) -> bool:
    """A date is available only on an approved hall, in the future or today, with no booking."""
    hall = await _require_hall(catalog, hall_id)
    await ledger.list_by_hall(hall_id)
    return is_bookable(hall) and ledger.index.is_available(hall_id, day, today)


async def get_booking_on(
    ledger: BookingLedger,
    catalog: HallCatalog,
    *,
    hall_id: int,
    day: date,
) -> tuple[Optional[BookingRecord], HallInfo]:
    hall = await _require_hall(catalog, hall_id)
    await ledger.list_by_hall(hall_id)
    return ledger.index.booking_on(hall_id, day), hall


async def create_booking(
    ledger: BookingLedger,
    catalog: HallCatalog,
    *,
    hall_id: int,
    booking_date: Any,
    guest_count: Any,
    first_name: Optional[str],
    last_name: Optional[str],
    phone: Optional[str],
    requesting_user: CurrentUser,
    today: date,
) -> tuple[BookingRecord, HallInfo]:
    if requesting_user.role != UserRole.CUSTOMER:
        raise UnauthorizedError("only customers can book a hall")
    draft = validate_shape(
        BookingRequest(
            hall_id=hall_id,
            booking_date=booking_date,
            guest_count=guest_count,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
        ),
        customer_id=requesting_user.id,
    )

    hall = await catalog.get_hall(hall_id)
    if hall is None or not is_bookable(hall):
        raise NotFoundError("hall not found")

    await ledger.list_by_hall(hall_id)
    validate_booking(draft, hall, ledger.index, today=today)

    try:
        record = await ledger.create(draft)
    except ConflictError as exc:
        raise DateUnavailableError("date is already booked") from exc
    return record, hall


async def cancel_booking(
    ledger: BookingLedger,
    catalog: HallCatalog,
    *,
    booking_id: int,
    requesting_user: CurrentUser,
) -> tuple[BookingRecord, Optional[HallInfo]]:
    """Hard-delete a booking, freeing its date. Returns the removed record for auditing."""
    record = await ledger.get(booking_id)
    hall = await catalog.get_hall(record.hall_id)
    ensure_can_cancel(requesting_user, record, hall)
    await ledger.delete(booking_id)
    return record, hall


async def _scoped_bookings(ledger: BookingLedger, catalog: HallCatalog, scope: BookingScope) -> List[BookingRecord]:
    if scope.role == UserRole.ADMIN:
        if scope.hall_id is not None:
            return await ledger.list_by_hall(scope.hall_id)
        return await ledger.list_all()

    if scope.role == UserRole.OWNER:
        owned = await catalog.list_halls(owner_id=scope.user_id)
        hall_ids = [hall.id for hall in owned]
        if scope.hall_id is not None:
            hall_ids = [hid for hid in hall_ids if hid == scope.hall_id]
        bookings: List[BookingRecord] = []
        for hid in hall_ids:
            bookings.extend(await ledger.list_by_hall(hid))
        return bookings

    bookings = await ledger.list_by_customer(scope.user_id)
    if scope.hall_id is not None:
        bookings = [b for b in bookings if b.hall_id == scope.hall_id]
    return bookings


async def load_scope(
    ledger: BookingLedger,
    catalog: HallCatalog,
    scope: BookingScope,
) -> tuple[List[BookingRecord], dict[int, HallInfo]]:
    """Fetch the role-scoped booking set and the halls it references."""
    bookings = await _scoped_bookings(ledger, catalog, scope)
    halls = await catalog.get_halls({b.hall_id for b in bookings})
    return bookings, halls


async def list_bookings(
    ledger: BookingLedger,
    catalog: HallCatalog,
    *,
    scope: BookingScope,
    filters: BookingFilter,
    today: date,
) -> List[BookingEntry]:
    bookings, halls = await load_scope(ledger, catalog, scope)
    return apply_filters(bookings, filters, halls, today)


async def hall_calendar(
    ledger: BookingLedger,
    catalog: HallCatalog,
    *,
    hall_id: int,
    start: date,
    end: date,
    today: date,
) -> List[DayAvailability]:
    await _require_hall(catalog, hall_id)
    await ledger.list_by_hall(hall_id)
    return ledger.index.calendar(hall_id, start, end, today)
