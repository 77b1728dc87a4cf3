from __future__ import annotations

from typing import Iterable, Protocol

from .entities import BookingDraft, BookingRecord, HallInfo


class BookingStore(Protocol):
    """Durable booking storage. Enforces one booking per (hall_id, booking_date)."""

    async def insert(self, draft: BookingDraft) -> BookingRecord: ...

    async def delete(self, booking_id: int) -> bool: ...

    async def get(self, booking_id: int) -> BookingRecord | None: ...

    async def query_by_hall(self, hall_id: int) -> list[BookingRecord]: ...

    async def query_by_customer(self, customer_id: int) -> list[BookingRecord]: ...

    async def query_all(self) -> list[BookingRecord]: ...


class HallCatalog(Protocol):
    async def get_hall(self, hall_id: int) -> HallInfo | None: ...

    async def get_halls(self, hall_ids: Iterable[int]) -> dict[int, HallInfo]: ...

    async def list_halls(self, owner_id: int | None = None) -> list[HallInfo]: ...
