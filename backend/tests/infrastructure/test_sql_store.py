from dataclasses import replace
from datetime import date
from decimal import Decimal
from types import SimpleNamespace
from typing import Any, cast

import pytest
from fakes import CUSTOMER_B, HALL
from hall_booking.domain.entities import BookingDraft, CustomerIdentity
from hall_booking.domain.errors import ConflictError, PersistenceUnavailableError
from hall_booking.infrastructure.repositories import SqlAlchemyBookingStore, SqlAlchemyHallCatalog
from hall_booking.models import Booking, Hall
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlite_db import sqlite_sessions

DRAFT = BookingDraft(
    hall_id=1,
    booking_date=date(2025, 6, 1),
    guest_count=40,
    customer=CustomerIdentity(first_name="Aziza", last_name="Karimova", phone="+998901234567"),
    customer_id=100,
)


class DummySession:
    def __init__(self, *, flush_error: Exception | None = None, result: Any = None) -> None:
        self.flush_error = flush_error
        self.result = result
        self.added: list[Any] = []

    def add(self, obj: Any) -> None:
        self.added.append(obj)

    async def flush(self) -> None:
        if self.flush_error is not None:
            raise self.flush_error
        for obj in self.added:
            obj.id = 7

    async def execute(self, *args: Any, **kwargs: Any) -> Any:
        if isinstance(self.result, Exception):
            raise self.result
        return self.result

    async def scalar(self, *args: Any, **kwargs: Any) -> Any:
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def _store(session: DummySession) -> SqlAlchemyBookingStore:
    return SqlAlchemyBookingStore(cast(AsyncSession, session))


@pytest.mark.asyncio
async def test_insert_returns_record_with_assigned_id() -> None:
    session = DummySession()
    record = await _store(session).insert(DRAFT)
    assert record.id == 7
    assert record.booking_date == DRAFT.booking_date
    assert record.customer == DRAFT.customer
    assert isinstance(session.added[0], Booking)


@pytest.mark.asyncio
async def test_insert_maps_unique_violation_to_conflict() -> None:
    session = DummySession(flush_error=IntegrityError("INSERT", {}, Exception("uq_bookings_hall_date")))
    with pytest.raises(ConflictError):
        await _store(session).insert(DRAFT)


@pytest.mark.asyncio
async def test_insert_maps_connection_failure_to_unavailable() -> None:
    session = DummySession(flush_error=OperationalError("INSERT", {}, Exception("gone away")))
    with pytest.raises(PersistenceUnavailableError):
        await _store(session).insert(DRAFT)


@pytest.mark.asyncio
@pytest.mark.parametrize(("rowcount", "expected"), [(1, True), (0, False)])
async def test_delete_reports_whether_a_row_was_removed(rowcount: int, expected: bool) -> None:
    session = DummySession(result=SimpleNamespace(rowcount=rowcount))
    assert await _store(session).delete(7) is expected


@pytest.mark.asyncio
async def test_get_missing_returns_none() -> None:
    assert await _store(DummySession(result=None)).get(7) is None


@pytest.mark.asyncio
async def test_get_failure_is_surfaced() -> None:
    session = DummySession(result=OperationalError("SELECT", {}, Exception("timeout")))
    with pytest.raises(PersistenceUnavailableError):
        await _store(session).get(7)


@pytest.mark.asyncio
async def test_hall_catalog_maps_row_to_hall_info() -> None:
    row = Hall(
        id=3,
        name="Oqsaroy",
        district="Chilanzar",
        capacity=100,
        price_per_guest=Decimal("25.00"),
        approved=True,
        owner_id=10,
    )
    catalog = SqlAlchemyHallCatalog(cast(AsyncSession, DummySession(result=row)))
    hall = await catalog.get_hall(3)
    assert hall is not None
    assert (hall.id, hall.capacity, hall.approved, hall.owner_id) == (3, 100, True, 10)


@pytest.mark.asyncio
async def test_hall_catalog_get_halls_skips_query_for_empty_ids() -> None:
    catalog = SqlAlchemyHallCatalog(cast(AsyncSession, DummySession(result=RuntimeError("should not query"))))
    assert await catalog.get_halls([]) == {}


def test_booking_table_enforces_one_booking_per_hall_and_day() -> None:
    constraints = {c.name: c for c in Booking.__table__.constraints}
    unique = constraints["uq_bookings_hall_date"]
    assert [col.name for col in unique.columns] == ["hall_id", "booking_date"]


@pytest.mark.asyncio
async def test_store_round_trip_on_sqlite() -> None:
    async with sqlite_sessions() as sessions:
        async with sessions() as session, session.begin():
            store = SqlAlchemyBookingStore(session)
            record = await store.insert(DRAFT)
            assert await store.get(record.id) == record
            assert await store.query_by_customer(DRAFT.customer_id) == [record]
            assert await store.delete(record.id) is True
            assert await store.delete(record.id) is False
            assert await store.get(record.id) is None


@pytest.mark.asyncio
async def test_unique_constraint_rejects_second_booking_for_same_day_on_sqlite() -> None:
    async with sqlite_sessions() as sessions:
        async with sessions() as session, session.begin():
            first = await SqlAlchemyBookingStore(session).insert(DRAFT)

        async with sessions() as session:
            with pytest.raises(ConflictError):
                async with session.begin():
                    await SqlAlchemyBookingStore(session).insert(replace(DRAFT, customer_id=CUSTOMER_B.id))

        async with sessions() as session:
            rows = await SqlAlchemyBookingStore(session).query_by_hall(DRAFT.hall_id)
    assert rows == [first]


@pytest.mark.asyncio
async def test_hall_catalog_reads_seeded_hall_on_sqlite() -> None:
    async with sqlite_sessions() as sessions:
        async with sessions() as session:
            catalog = SqlAlchemyHallCatalog(session)
            assert await catalog.get_hall(HALL.id) == HALL
            assert [h.id for h in await catalog.list_halls(owner_id=HALL.owner_id)] == [HALL.id]
            assert await catalog.get_hall(999) is None
