import pytest
from fakes import HALL, OTHER_HALL, PENDING_HALL, InMemoryBookingStore, InMemoryHallCatalog
from hall_booking.domain.ledger import BookingLedger


@pytest.fixture
def store() -> InMemoryBookingStore:
    return InMemoryBookingStore()


@pytest.fixture
def catalog() -> InMemoryHallCatalog:
    return InMemoryHallCatalog([HALL, OTHER_HALL, PENDING_HALL])


@pytest.fixture
def ledger(store: InMemoryBookingStore) -> BookingLedger:
    return BookingLedger(store)
