from __future__ import annotations

from typing import Callable, Dict, Iterable, List

from .availability import AvailabilityIndex
from .entities import BookingDraft, BookingRecord
from .errors import ConflictError, NotFoundError
from .repositories import BookingStore


class BookingLedger:
    """
    Booking records known to the current request, written through to the store.

    Each read refreshes the affected records from storage; each mutation or refresh
    rebuilds the availability index so it never drifts from the ledger. Reads hand
    out list copies, never the internal mapping.
    """

    def __init__(self, store: BookingStore) -> None:
        self._store = store
        self._records: Dict[int, BookingRecord] = {}
        self.index = AvailabilityIndex()

    async def create(self, draft: BookingDraft) -> BookingRecord:
        occupant = self.index.booking_on(draft.hall_id, draft.booking_date)
        if occupant is not None:
            raise ConflictError(f"hall {draft.hall_id} already booked on {draft.booking_date.isoformat()}")
        # The store raises ConflictError as well when its uniqueness constraint trips.
        record = await self._store.insert(draft)
        self._records[record.id] = record
        self._reindex()
        return record

    async def delete(self, booking_id: int) -> None:
        removed = await self._store.delete(booking_id)
        self._records.pop(booking_id, None)
        self._reindex()
        if not removed:
            raise NotFoundError(f"booking {booking_id} not found")

    async def get(self, booking_id: int) -> BookingRecord:
        record = await self._store.get(booking_id)
        if record is None:
            self._records.pop(booking_id, None)
            self._reindex()
            raise NotFoundError(f"booking {booking_id} not found")
        self._records[record.id] = record
        self._reindex()
        return record

    async def list_by_hall(self, hall_id: int) -> List[BookingRecord]:
        fetched = await self._store.query_by_hall(hall_id)
        self._replace(lambda r: r.hall_id == hall_id, fetched)
        return list(fetched)

    async def list_by_customer(self, customer_id: int) -> List[BookingRecord]:
        fetched = await self._store.query_by_customer(customer_id)
        self._replace(lambda r: r.customer_id == customer_id, fetched)
        return list(fetched)

    async def list_all(self) -> List[BookingRecord]:
        fetched = await self._store.query_all()
        self._replace(lambda r: True, fetched)
        return list(fetched)

    def snapshot(self) -> List[BookingRecord]:
        return list(self._records.values())

    def _replace(self, stale: Callable[[BookingRecord], bool], fetched: Iterable[BookingRecord]) -> None:
        records = {rid: rec for rid, rec in self._records.items() if not stale(rec)}
        for record in fetched:
            records[record.id] = record
        self._records = records
        self._reindex()

    def _reindex(self) -> None:
        self.index.rebuild(self._records.values())
