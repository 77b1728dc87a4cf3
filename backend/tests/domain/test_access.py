from datetime import date

import pytest
from fakes import ADMIN, CUSTOMER_A, CUSTOMER_B, HALL, OWNER_X, OWNER_Y, make_record
from hall_booking.domain.access import BookingScope, can_view, ensure_can_cancel
from hall_booking.domain.errors import UnauthorizedError
from hall_booking.models import UserRole

BOOKING = make_record(1, date(2025, 6, 1), customer_id=CUSTOMER_A.id)


@pytest.mark.parametrize("user", [CUSTOMER_A, OWNER_X, ADMIN])
def test_owning_customer_hall_owner_and_admin_can_cancel(user) -> None:
    assert can_view(user, BOOKING, HALL)
    ensure_can_cancel(user, BOOKING, HALL)


@pytest.mark.parametrize("user", [CUSTOMER_B, OWNER_Y])
def test_other_customers_and_owners_are_refused(user) -> None:
    assert not can_view(user, BOOKING, HALL)
    with pytest.raises(UnauthorizedError):
        ensure_can_cancel(user, BOOKING, HALL)


def test_owner_without_hall_data_is_refused() -> None:
    assert not can_view(OWNER_X, BOOKING, None)


def test_scope_is_built_from_the_requesting_user() -> None:
    scope = BookingScope.for_user(OWNER_X, hall_id=HALL.id)
    assert scope.role == UserRole.OWNER
    assert scope.user_id == OWNER_X.id
    assert scope.hall_id == HALL.id
