from datetime import date

from fakes import HALL, OTHER_HALL, make_record
from hall_booking.domain.filters import BookingBoard, BookingFilter, apply_filters
from hall_booking.domain.status import BookingStatus

TODAY = date(2025, 5, 1)
HALLS = {HALL.id: HALL, OTHER_HALL.id: OTHER_HALL}

BOOKINGS = [
    make_record(3, date(2025, 7, 1)),
    make_record(1, date(2025, 4, 1)),
    make_record(2, date(2025, 6, 1), hall_id=OTHER_HALL.id),
    make_record(4, TODAY),
]


def test_no_filter_returns_everything_sorted_by_date() -> None:
    entries = apply_filters(BOOKINGS, BookingFilter(), HALLS, TODAY)
    assert [e.booking.id for e in entries] == [1, 4, 2, 3]
    assert [e.status for e in entries] == [
        BookingStatus.PAST,
        BookingStatus.UPCOMING,
        BookingStatus.UPCOMING,
        BookingStatus.UPCOMING,
    ]


def test_predicates_combine_with_and() -> None:
    filters = BookingFilter(hall_id=HALL.id, status=BookingStatus.UPCOMING)
    entries = apply_filters(BOOKINGS, filters, HALLS, TODAY)
    assert [e.booking.id for e in entries] == [4, 3]


def test_district_uses_supplied_hall_data() -> None:
    entries = apply_filters(BOOKINGS, BookingFilter(district="Yunusabad"), HALLS, TODAY)
    assert [e.booking.id for e in entries] == [2]
    assert entries[0].hall == OTHER_HALL


def test_district_filter_excludes_bookings_without_hall_data() -> None:
    entries = apply_filters(BOOKINGS, BookingFilter(district="Chilanzar"), {}, TODAY)
    assert entries == []


def test_past_filter() -> None:
    entries = apply_filters(BOOKINGS, BookingFilter(status=BookingStatus.PAST), HALLS, TODAY)
    assert [e.booking.id for e in entries] == [1]


def test_same_date_ties_break_on_id() -> None:
    tied = [make_record(9, date(2025, 6, 1), hall_id=OTHER_HALL.id), make_record(5, date(2025, 6, 1))]
    entries = apply_filters(tied, BookingFilter(), HALLS, TODAY)
    assert [e.booking.id for e in entries] == [5, 9]


def test_board_merges_filters_and_resets_without_refetch() -> None:
    board = BookingBoard(BOOKINGS, HALLS)
    narrowed = board.set_filters(BookingFilter(hall_id=HALL.id), today=TODAY)
    assert [e.booking.id for e in narrowed] == [1, 4, 3]

    narrowed = board.set_filters(BookingFilter(status=BookingStatus.PAST), today=TODAY)
    assert board.filters == BookingFilter(hall_id=HALL.id, status=BookingStatus.PAST)
    assert [e.booking.id for e in narrowed] == [1]

    full = board.reset_filters(today=TODAY)
    assert board.filters == BookingFilter()
    assert [e.booking.id for e in full] == [1, 4, 2, 3]
