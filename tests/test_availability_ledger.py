from datetime import date, timedelta

import pytest

from villa_admin import crud
from villa_admin.core.exceptions import InvalidDateRangeError, NotFoundError, ValidationError
from villa_admin.models import CalendarStatus, EventType, ReservationStatus
from villa_admin.services import availability_ledger as ledger


def _rows(db, villa_id, start, end):
    return crud.calendar_day.get_range_by_date(db, villa_id=villa_id, start_date=start, end_date=end)


class TestConflicts:
    def test_overlapping_stay_conflicts(self, db, villa, make_reservation):
        make_reservation(villa.id, date(2024, 7, 1), date(2024, 7, 8))

        assert ledger.check_conflict(db, villa.id, date(2024, 7, 5), date(2024, 7, 10)) is True

    def test_checkout_day_checkin_is_not_a_conflict(self, db, villa, make_reservation):
        make_reservation(villa.id, date(2024, 7, 1), date(2024, 7, 8))

        assert ledger.check_conflict(db, villa.id, date(2024, 7, 8), date(2024, 7, 12)) is False

    def test_stay_ending_on_existing_checkin_day_is_free(self, db, villa, make_reservation):
        make_reservation(villa.id, date(2024, 7, 8), date(2024, 7, 12))

        assert ledger.check_conflict(db, villa.id, date(2024, 7, 1), date(2024, 7, 8)) is False

    def test_cancelled_reservations_do_not_block(self, db, villa, make_reservation):
        make_reservation(villa.id, date(2024, 7, 1), date(2024, 7, 8), status=ReservationStatus.CANCELLED)

        assert ledger.check_conflict(db, villa.id, date(2024, 7, 2), date(2024, 7, 4)) is False

    def test_other_villas_do_not_block(self, db, make_villa, make_reservation):
        first, second = make_villa(), make_villa()
        make_reservation(first.id, date(2024, 7, 1), date(2024, 7, 8))

        assert ledger.check_conflict(db, second.id, date(2024, 7, 1), date(2024, 7, 8)) is False

    def test_reservation_never_conflicts_with_itself_when_excluded(self, db, villa, make_reservation):
        booked = make_reservation(villa.id, date(2024, 7, 1), date(2024, 7, 8))

        assert ledger.check_conflict(db, villa.id, date(2024, 7, 1), date(2024, 7, 8)) is True
        assert ledger.check_conflict(
            db, villa.id, date(2024, 7, 1), date(2024, 7, 8), exclude_reservation_id=booked.id
        ) is False

    def test_find_conflicts_lists_clashing_reservations(self, db, villa, make_reservation):
        first = make_reservation(villa.id, date(2024, 7, 1), date(2024, 7, 5))
        second = make_reservation(villa.id, date(2024, 7, 6), date(2024, 7, 9))
        make_reservation(villa.id, date(2024, 7, 20), date(2024, 7, 22))

        conflicts = ledger.find_conflicts(db, villa.id, date(2024, 7, 3), date(2024, 7, 7))

        assert [r.booking_ref for r in conflicts] == [first.booking_ref, second.booking_ref]

    @pytest.mark.parametrize("a,b", [
        ((1, 8), (5, 10)),
        ((1, 8), (8, 12)),
        ((1, 8), (2, 3)),
        ((1, 8), (10, 12)),
        ((3, 4), (1, 8)),
    ])
    def test_overlap_is_symmetric(self, a, b):
        a_start, a_end = date(2024, 7, a[0]), date(2024, 7, a[1])
        b_start, b_end = date(2024, 7, b[0]), date(2024, 7, b[1])

        assert ledger.ranges_overlap(a_start, a_end, b_start, b_end) == ledger.ranges_overlap(b_start, b_end, a_start, a_end)

    def test_empty_stay_is_left_to_stay_validation(self, db, villa, make_reservation):
        make_reservation(villa.id, date(2024, 7, 1), date(2024, 7, 8))

        assert ledger.check_conflict(db, villa.id, date(2024, 7, 10), date(2024, 7, 10)) is False
        with pytest.raises(InvalidDateRangeError):
            ledger.validate_stay_range(date(2024, 7, 8), date(2024, 7, 8))

    def test_overlong_stay_is_rejected(self, monkeypatch):
        monkeypatch.setattr(ledger.settings, "CALENDAR_MAX_BULK_DAYS", 30)

        ledger.validate_stay_range(date(2024, 7, 1), date(2024, 7, 31))
        with pytest.raises(ValidationError):
            ledger.validate_stay_range(date(2024, 7, 1), date(2024, 8, 1))


class TestBulkEdits:
    def test_mark_blocked_creates_missing_rows(self, db, villa):
        updated = ledger.mark_blocked(db, villa.id, date(2030, 3, 1), date(2030, 3, 5), note="Painting")

        rows = _rows(db, villa.id, date(2030, 3, 1), date(2030, 3, 5))
        assert updated == 5
        assert len(rows) == 5
        assert all(r.status == CalendarStatus.BLOCKED for r in rows.values())
        assert all(r.note == "Painting" for r in rows.values())

    def test_mark_range_is_inclusive_of_end_date(self, db, villa):
        ledger.mark_blocked(db, villa.id, date(2030, 3, 1), date(2030, 3, 1))

        rows = _rows(db, villa.id, date(2030, 2, 28), date(2030, 3, 2))
        assert list(rows) == [date(2030, 3, 1)]

    def test_mark_available_reopens_blocked_days(self, db, villa):
        ledger.mark_blocked(db, villa.id, date(2030, 3, 1), date(2030, 3, 5))

        ledger.mark_available(db, villa.id, date(2030, 3, 2), date(2030, 3, 3))

        rows = _rows(db, villa.id, date(2030, 3, 1), date(2030, 3, 5))
        statuses = [rows[day].status for day in sorted(rows)]
        assert statuses == [
            CalendarStatus.BLOCKED,
            CalendarStatus.AVAILABLE,
            CalendarStatus.AVAILABLE,
            CalendarStatus.BLOCKED,
            CalendarStatus.BLOCKED,
        ]

    def test_special_offer_keeps_status_and_sets_price(self, db, villa):
        ledger.mark_blocked(db, villa.id, date(2030, 3, 1), date(2030, 3, 1))

        ledger.mark_special_offer(db, villa.id, date(2030, 3, 1), date(2030, 3, 2), price=3500)

        rows = _rows(db, villa.id, date(2030, 3, 1), date(2030, 3, 2))
        assert rows[date(2030, 3, 1)].status == CalendarStatus.BLOCKED
        assert rows[date(2030, 3, 2)].status == CalendarStatus.AVAILABLE
        assert all(r.event_type == EventType.SPECIAL_OFFER for r in rows.values())
        assert all(r.price == 3500 for r in rows.values())

    def test_clear_special_offer_only_touches_offer_days(self, db, villa):
        ledger.mark_special_offer(db, villa.id, date(2030, 3, 1), date(2030, 3, 2), price=3500)

        cleared = ledger.clear_special_offer(db, villa.id, date(2030, 2, 25), date(2030, 3, 10))

        rows = _rows(db, villa.id, date(2030, 2, 25), date(2030, 3, 10))
        assert cleared == 2
        assert len(rows) == 2
        assert all(r.event_type is None for r in rows.values())

    def test_negative_price_is_rejected(self, db, villa):
        with pytest.raises(ValidationError):
            ledger.mark_special_offer(db, villa.id, date(2030, 3, 1), date(2030, 3, 2), price=-1)

    def test_reversed_range_is_rejected(self, db, villa):
        with pytest.raises(InvalidDateRangeError):
            ledger.mark_blocked(db, villa.id, date(2030, 3, 5), date(2030, 3, 1))

    def test_oversized_range_is_rejected(self, db, villa):
        start = date(2030, 1, 1)
        with pytest.raises(ValidationError):
            ledger.mark_blocked(db, villa.id, start, start + timedelta(days=5000))

    def test_unknown_villa(self, db):
        with pytest.raises(NotFoundError):
            ledger.mark_blocked(db, 999, date(2030, 3, 1), date(2030, 3, 2))


class TestReserveRelease:
    def test_reserve_marks_nights_and_flags_turnover_days(self, db, villa):
        nights = ledger.reserve(db, villa.id, date(2030, 7, 1), date(2030, 7, 4))

        rows = _rows(db, villa.id, date(2030, 7, 1), date(2030, 7, 4))
        assert nights == 3
        assert [rows[day].status for day in sorted(rows)] == [
            CalendarStatus.RESERVED,
            CalendarStatus.RESERVED,
            CalendarStatus.RESERVED,
            CalendarStatus.AVAILABLE,
        ]
        assert rows[date(2030, 7, 1)].event_type == EventType.CHECKIN
        assert rows[date(2030, 7, 2)].event_type is None
        assert rows[date(2030, 7, 4)].event_type == EventType.CHECKOUT

    @pytest.mark.parametrize("first,second", [
        ((date(2030, 7, 1), date(2030, 7, 8)), (date(2030, 7, 8), date(2030, 7, 12))),
        ((date(2030, 7, 8), date(2030, 7, 12)), (date(2030, 7, 1), date(2030, 7, 8))),
    ])
    def test_back_to_back_stays_flag_checkin_on_turnover_day(self, db, villa, first, second):
        ledger.reserve(db, villa.id, *first)
        ledger.reserve(db, villa.id, *second)

        turnover = _rows(db, villa.id, date(2030, 7, 8), date(2030, 7, 8))[date(2030, 7, 8)]
        assert turnover.status == CalendarStatus.RESERVED
        assert turnover.event_type == EventType.CHECKIN

    def test_reserve_keeps_special_offer_tag(self, db, villa):
        ledger.mark_special_offer(db, villa.id, date(2030, 7, 1), date(2030, 7, 1), price=3500)

        ledger.reserve(db, villa.id, date(2030, 7, 1), date(2030, 7, 3))

        row = _rows(db, villa.id, date(2030, 7, 1), date(2030, 7, 1))[date(2030, 7, 1)]
        assert row.status == CalendarStatus.RESERVED
        assert row.event_type == EventType.SPECIAL_OFFER
        assert row.price == 3500

    def test_release_frees_nights_and_clears_flags(self, db, villa):
        ledger.reserve(db, villa.id, date(2030, 7, 1), date(2030, 7, 4))

        changed = ledger.release(db, villa.id, date(2030, 7, 1), date(2030, 7, 4))

        rows = _rows(db, villa.id, date(2030, 7, 1), date(2030, 7, 4))
        assert changed == 3
        assert all(r.status == CalendarStatus.AVAILABLE for r in rows.values())
        assert all(r.event_type is None for r in rows.values())

    def test_release_of_available_range_is_a_noop(self, db, villa):
        ledger.mark_available(db, villa.id, date(2030, 7, 1), date(2030, 7, 10))

        assert ledger.release(db, villa.id, date(2030, 7, 1), date(2030, 7, 10)) == 0
        assert ledger.release(db, villa.id, date(2030, 7, 1), date(2030, 7, 10)) == 0

    def test_release_without_rows_is_a_noop(self, db, villa):
        assert ledger.release(db, villa.id, date(2031, 1, 1), date(2031, 1, 5)) == 0
        assert _rows(db, villa.id, date(2031, 1, 1), date(2031, 1, 5)) == {}

    def test_release_leaves_blocked_days_blocked(self, db, villa):
        ledger.mark_blocked(db, villa.id, date(2030, 7, 1), date(2030, 7, 3))

        ledger.release(db, villa.id, date(2030, 7, 1), date(2030, 7, 3))

        rows = _rows(db, villa.id, date(2030, 7, 1), date(2030, 7, 3))
        assert all(r.status == CalendarStatus.BLOCKED for r in rows.values())
