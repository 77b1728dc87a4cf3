from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..domain.entities import BookingDraft, BookingRecord, CustomerIdentity, HallInfo
from ..domain.errors import ConflictError, PersistenceUnavailableError
from ..domain.repositories import BookingStore, HallCatalog
from ..models import Booking, Hall
from ..utils.time import utc_now_naive

logger = logging.getLogger(__name__)


def _to_record(row: Booking) -> BookingRecord:
    return BookingRecord(
        id=row.id,
        hall_id=row.hall_id,
        booking_date=row.booking_date,
        guest_count=row.guest_count,
        customer=CustomerIdentity(first_name=row.first_name, last_name=row.last_name, phone=row.phone),
        customer_id=row.customer_id,
    )


def _to_hall(row: Hall) -> HallInfo:
    return HallInfo(
        id=row.id,
        name=row.name,
        district=row.district,
        capacity=row.capacity,
        price_per_guest=row.price_per_guest,
        approved=row.approved,
        owner_id=row.owner_id,
    )


class SqlAlchemyBookingStore(BookingStore):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def insert(self, draft: BookingDraft) -> BookingRecord:
        booking = Booking(
            hall_id=draft.hall_id,
            customer_id=draft.customer_id,
            booking_date=draft.booking_date,
            guest_count=draft.guest_count,
            first_name=draft.customer.first_name,
            last_name=draft.customer.last_name,
            phone=draft.customer.phone,
            created_at=utc_now_naive(),
        )
        self.session.add(booking)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            # uq_bookings_hall_date: another request took the day first
            raise ConflictError(
                f"hall {draft.hall_id} already booked on {draft.booking_date.isoformat()}"
            ) from exc
        except (SQLAlchemyError, OSError) as exc:
            logger.warning("booking insert failed: %s", exc)
            raise PersistenceUnavailableError("booking storage unavailable") from exc
        return _to_record(booking)

    async def delete(self, booking_id: int) -> bool:
        try:
            result = await self.session.execute(delete(Booking).where(Booking.id == booking_id))
        except (SQLAlchemyError, OSError) as exc:
            logger.warning("booking delete failed: %s", exc)
            raise PersistenceUnavailableError("booking storage unavailable") from exc
        return bool(getattr(result, "rowcount", 0))

    async def get(self, booking_id: int) -> BookingRecord | None:
        try:
            row = await self.session.scalar(select(Booking).where(Booking.id == booking_id))
        except (SQLAlchemyError, OSError) as exc:
            logger.warning("booking lookup failed: %s", exc)
            raise PersistenceUnavailableError("booking storage unavailable") from exc
        return _to_record(row) if isinstance(row, Booking) else None

    async def query_by_hall(self, hall_id: int) -> List[BookingRecord]:
        return await self._query(select(Booking).where(Booking.hall_id == hall_id))

    async def query_by_customer(self, customer_id: int) -> List[BookingRecord]:
        return await self._query(select(Booking).where(Booking.customer_id == customer_id))

    async def query_all(self) -> List[BookingRecord]:
        return await self._query(select(Booking))

    async def _query(self, stmt) -> List[BookingRecord]:
        try:
            rows = await self.session.scalars(stmt.order_by(Booking.booking_date, Booking.id))
        except (SQLAlchemyError, OSError) as exc:
            logger.warning("booking query failed: %s", exc)
            raise PersistenceUnavailableError("booking storage unavailable") from exc
        return [_to_record(row) for row in rows.all()]


class SqlAlchemyHallCatalog(HallCatalog):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_hall(self, hall_id: int) -> Optional[HallInfo]:
        try:
            row = await self.session.scalar(select(Hall).where(Hall.id == hall_id))
        except (SQLAlchemyError, OSError) as exc:
            logger.warning("hall lookup failed: %s", exc)
            raise PersistenceUnavailableError("hall catalog unavailable") from exc
        return _to_hall(row) if isinstance(row, Hall) else None

    async def get_halls(self, hall_ids: Iterable[int]) -> dict[int, HallInfo]:
        ids = sorted(set(hall_ids))
        if not ids:
            return {}
        rows = await self._query(select(Hall).where(Hall.id.in_(ids)))
        return {hall.id: hall for hall in rows}

    async def list_halls(self, owner_id: int | None = None) -> List[HallInfo]:
        stmt = select(Hall)
        if owner_id is not None:
            stmt = stmt.where(Hall.owner_id == owner_id)
        return await self._query(stmt.order_by(Hall.id))

    async def _query(self, stmt) -> List[HallInfo]:
        try:
            rows = await self.session.scalars(stmt)
        except (SQLAlchemyError, OSError) as exc:
            logger.warning("hall query failed: %s", exc)
            raise PersistenceUnavailableError("hall catalog unavailable") from exc
        return [_to_hall(row) for row in rows.all()]
