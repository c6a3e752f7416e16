from datetime import date, timedelta
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from villa_admin import crud
from villa_admin.core.exceptions import (
    CalendarSyncError,
    DuplicateBookingRefError,
    IncompleteQuoteError,
    MinimumStayError,
    NotFoundError,
    ReservationConflictError,
    ValidationError,
)
from villa_admin.models import CalendarStatus, EventType, PaymentType, Reservation, ReservationStatus, VillaStatus
from villa_admin.schemas.reservation import ReservationCreate, ReservationUpdate
from villa_admin.services import availability_ledger, reservation_service


def _booking(villa_id, start, end, **extra):
    fields = {
        "villa_id": villa_id,
        "start_date": start,
        "end_date": end,
        "guest_count": 2,
        "customer_name": "Ayse Yilmaz",
        "customer_email": "ayse@example.com",
        "customer_phone": "+905551112233",
    }
    fields.update(extra)
    return ReservationCreate(**fields)


def _calendar(db, villa_id, start, end):
    return crud.calendar_day.get_range_by_date(db, villa_id=villa_id, start_date=start, end_date=end)


@pytest.fixture
def summer(villa, make_season):
    return make_season(villa.id, date(2030, 6, 1), date(2030, 8, 31), 5000, season_name="Summer")


class TestCreate:
    def test_quotes_total_and_splits_payment(self, db, villa, summer):
        reservation = reservation_service.create_reservation(
            db, _booking(villa.id, date(2030, 7, 1), date(2030, 7, 8))
        )

        assert reservation.status == ReservationStatus.PENDING
        assert reservation.total_amount == Decimal("35000")
        assert reservation.advance_amount == Decimal("10500")
        assert reservation.remaining_amount == Decimal("24500")
        assert reservation.booking_ref.startswith(f"VR-{villa.id}-")

    def test_reserves_calendar_in_same_write(self, db, villa, summer):
        reservation_service.create_reservation(db, _booking(villa.id, date(2030, 7, 1), date(2030, 7, 4)))

        rows = _calendar(db, villa.id, date(2030, 7, 1), date(2030, 7, 4))
        assert [rows[day].status for day in sorted(rows)] == [
            CalendarStatus.RESERVED,
            CalendarStatus.RESERVED,
            CalendarStatus.RESERVED,
            CalendarStatus.AVAILABLE,
        ]
        assert rows[date(2030, 7, 1)].event_type == EventType.CHECKIN
        assert rows[date(2030, 7, 4)].event_type == EventType.CHECKOUT

    def test_full_payment_takes_everything_up_front(self, db, villa):
        reservation = reservation_service.create_reservation(
            db,
            _booking(
                villa.id, date(2030, 7, 1), date(2030, 7, 3),
                total_amount=Decimal("8000"), payment_type=PaymentType.FULL_PAYMENT,
            ),
        )

        assert reservation.advance_amount == Decimal("8000")
        assert reservation.remaining_amount == Decimal("0")

    def test_explicit_amounts_must_add_up(self, db, villa):
        with pytest.raises(ValidationError):
            reservation_service.create_reservation(
                db,
                _booking(
                    villa.id, date(2030, 7, 1), date(2030, 7, 3),
                    total_amount=Decimal("8000"), advance_amount=Decimal("2000"), remaining_amount=Decimal("5000"),
                ),
            )

    def test_advance_cannot_exceed_total(self, db, villa):
        with pytest.raises(ValidationError):
            reservation_service.create_reservation(
                db,
                _booking(
                    villa.id, date(2030, 7, 1), date(2030, 7, 3),
                    total_amount=Decimal("8000"), advance_amount=Decimal("9000"),
                ),
            )

    def test_unpriced_nights_block_the_booking(self, db, villa, summer):
        with pytest.raises(IncompleteQuoteError):
            reservation_service.create_reservation(db, _booking(villa.id, date(2030, 8, 30), date(2030, 9, 2)))

        assert db.query(Reservation).count() == 0

    def test_overlap_is_rejected_without_writing(self, db, villa, summer):
        first = reservation_service.create_reservation(db, _booking(villa.id, date(2030, 7, 1), date(2030, 7, 8)))

        with pytest.raises(ReservationConflictError) as exc_info:
            reservation_service.create_reservation(db, _booking(villa.id, date(2030, 7, 5), date(2030, 7, 10)))

        assert exc_info.value.details["conflicting_booking_refs"] == [first.booking_ref]
        assert db.query(Reservation).count() == 1
        assert _calendar(db, villa.id, date(2030, 7, 9), date(2030, 7, 9)) == {}

    def test_same_day_turnover_is_accepted(self, db, villa, summer):
        reservation_service.create_reservation(db, _booking(villa.id, date(2030, 7, 1), date(2030, 7, 8)))

        second = reservation_service.create_reservation(db, _booking(villa.id, date(2030, 7, 8), date(2030, 7, 12)))

        assert second.id is not None
        turnover = _calendar(db, villa.id, date(2030, 7, 8), date(2030, 7, 8))[date(2030, 7, 8)]
        assert turnover.status == CalendarStatus.RESERVED
        assert turnover.event_type == EventType.CHECKIN

    def test_duplicate_booking_ref(self, db, villa, summer):
        reservation_service.create_reservation(
            db, _booking(villa.id, date(2030, 7, 1), date(2030, 7, 3), booking_ref="VR-FIXED")
        )

        with pytest.raises(DuplicateBookingRefError):
            reservation_service.create_reservation(
                db, _booking(villa.id, date(2030, 7, 10), date(2030, 7, 12), booking_ref="VR-FIXED")
            )

    def test_minimum_stay(self, db, make_villa):
        villa = make_villa(minimum_stay=3)

        with pytest.raises(MinimumStayError):
            reservation_service.create_reservation(
                db, _booking(villa.id, date(2030, 7, 1), date(2030, 7, 3), total_amount=Decimal("1000"))
            )

    def test_guest_limit(self, db, make_villa):
        villa = make_villa(max_guests=2)

        with pytest.raises(ValidationError):
            reservation_service.create_reservation(
                db,
                _booking(villa.id, date(2030, 7, 1), date(2030, 7, 3), guest_count=3, total_amount=Decimal("1000")),
            )

    def test_inactive_villa(self, db, make_villa):
        villa = make_villa(status=VillaStatus.INACTIVE)

        with pytest.raises(ValidationError):
            reservation_service.create_reservation(
                db, _booking(villa.id, date(2030, 7, 1), date(2030, 7, 3), total_amount=Decimal("1000"))
            )

    def test_unknown_villa(self, db):
        with pytest.raises(NotFoundError):
            reservation_service.create_reservation(
                db, _booking(999, date(2030, 7, 1), date(2030, 7, 3), total_amount=Decimal("1000"))
            )


class TestLifecycle:
    def test_cancel_releases_calendar(self, db, villa, summer):
        reservation = reservation_service.create_reservation(
            db, _booking(villa.id, date(2030, 7, 1), date(2030, 7, 4))
        )

        cancelled = reservation_service.update_status(
            db, reservation.id, ReservationStatus.CANCELLED, cancellation_reason="Flight cancelled"
        )

        assert cancelled.status == ReservationStatus.CANCELLED
        assert cancelled.cancelled_at is not None
        assert cancelled.cancellation_reason == "Flight cancelled"
        rows = _calendar(db, villa.id, date(2030, 7, 1), date(2030, 7, 4))
        assert all(r.status == CalendarStatus.AVAILABLE for r in rows.values())
        assert all(r.event_type is None for r in rows.values())

    def test_cancel_restores_neighbouring_checkout_flag(self, db, villa, summer):
        reservation_service.create_reservation(db, _booking(villa.id, date(2030, 7, 1), date(2030, 7, 8)))
        second = reservation_service.create_reservation(db, _booking(villa.id, date(2030, 7, 8), date(2030, 7, 12)))

        reservation_service.update_status(db, second.id, ReservationStatus.CANCELLED)

        rows = _calendar(db, villa.id, date(2030, 7, 7), date(2030, 7, 12))
        assert rows[date(2030, 7, 7)].status == CalendarStatus.RESERVED
        assert rows[date(2030, 7, 8)].status == CalendarStatus.AVAILABLE
        assert rows[date(2030, 7, 8)].event_type == EventType.CHECKOUT
        assert rows[date(2030, 7, 12)].event_type is None

    def test_cancelled_dates_can_be_rebooked(self, db, villa, summer):
        first = reservation_service.create_reservation(db, _booking(villa.id, date(2030, 7, 1), date(2030, 7, 8)))
        reservation_service.update_status(db, first.id, ReservationStatus.CANCELLED)

        again = reservation_service.create_reservation(db, _booking(villa.id, date(2030, 7, 3), date(2030, 7, 6)))

        assert again.status == ReservationStatus.PENDING

    def test_reactivation_rechecks_availability(self, db, villa, summer):
        first = reservation_service.create_reservation(db, _booking(villa.id, date(2030, 7, 1), date(2030, 7, 8)))
        reservation_service.update_status(db, first.id, ReservationStatus.CANCELLED)
        reservation_service.create_reservation(db, _booking(villa.id, date(2030, 7, 3), date(2030, 7, 6)))

        with pytest.raises(ReservationConflictError):
            reservation_service.update_status(db, first.id, ReservationStatus.CONFIRMED)

        assert reservation_service.get_reservation(db, first.id).status == ReservationStatus.CANCELLED

    def test_reactivation_reserves_again(self, db, villa, summer):
        reservation = reservation_service.create_reservation(
            db, _booking(villa.id, date(2030, 7, 1), date(2030, 7, 4))
        )
        reservation_service.update_status(db, reservation.id, ReservationStatus.CANCELLED)

        restored = reservation_service.update_status(db, reservation.id, ReservationStatus.CONFIRMED)

        assert restored.status == ReservationStatus.CONFIRMED
        assert restored.cancelled_at is None
        rows = _calendar(db, villa.id, date(2030, 7, 1), date(2030, 7, 3))
        assert all(r.status == CalendarStatus.RESERVED for r in rows.values())

    def test_transitions_are_free_form(self, db, villa, summer):
        reservation = reservation_service.create_reservation(
            db, _booking(villa.id, date(2030, 7, 1), date(2030, 7, 4))
        )

        reservation_service.update_status(db, reservation.id, ReservationStatus.COMPLETED)
        reverted = reservation_service.update_status(db, reservation.id, ReservationStatus.PENDING)

        assert reverted.status == ReservationStatus.PENDING

    def test_delete_releases_calendar(self, db, villa, summer):
        reservation = reservation_service.create_reservation(
            db, _booking(villa.id, date(2030, 7, 1), date(2030, 7, 4))
        )

        booking_ref = reservation_service.delete_reservation(db, reservation.id)

        assert crud.reservation.get_by_booking_ref(db, booking_ref=booking_ref) is None
        rows = _calendar(db, villa.id, date(2030, 7, 1), date(2030, 7, 4))
        assert all(r.status == CalendarStatus.AVAILABLE for r in rows.values())

    def test_delete_unknown(self, db):
        with pytest.raises(NotFoundError):
            reservation_service.delete_reservation(db, 999)

    def test_moving_dates_moves_calendar(self, db, villa, summer):
        reservation = reservation_service.create_reservation(
            db, _booking(villa.id, date(2030, 7, 1), date(2030, 7, 4))
        )

        moved = reservation_service.update_reservation(
            db, reservation.id, ReservationUpdate(start_date=date(2030, 7, 10), end_date=date(2030, 7, 13))
        )

        assert (moved.start_date, moved.end_date) == (date(2030, 7, 10), date(2030, 7, 13))
        old_rows = _calendar(db, villa.id, date(2030, 7, 1), date(2030, 7, 3))
        new_rows = _calendar(db, villa.id, date(2030, 7, 10), date(2030, 7, 12))
        assert all(r.status == CalendarStatus.AVAILABLE for r in old_rows.values())
        assert all(r.status == CalendarStatus.RESERVED for r in new_rows.values())

    def test_moving_into_another_stay_is_rejected(self, db, villa, summer):
        reservation_service.create_reservation(db, _booking(villa.id, date(2030, 7, 10), date(2030, 7, 15)))
        reservation = reservation_service.create_reservation(
            db, _booking(villa.id, date(2030, 7, 1), date(2030, 7, 4))
        )

        with pytest.raises(ReservationConflictError):
            reservation_service.update_reservation(
                db, reservation.id, ReservationUpdate(end_date=date(2030, 7, 11))
            )

    def test_extending_over_own_nights_is_allowed(self, db, villa, summer):
        reservation = reservation_service.create_reservation(
            db, _booking(villa.id, date(2030, 7, 1), date(2030, 7, 4))
        )

        extended = reservation_service.update_reservation(
            db, reservation.id, ReservationUpdate(end_date=date(2030, 7, 6))
        )

        assert extended.nights == 5
        rows = _calendar(db, villa.id, date(2030, 7, 1), date(2030, 7, 6))
        assert rows[date(2030, 7, 4)].status == CalendarStatus.RESERVED
        assert rows[date(2030, 7, 4)].event_type is None
        assert rows[date(2030, 7, 6)].event_type == EventType.CHECKOUT

    def test_changing_total_rederives_remaining(self, db, villa):
        reservation = reservation_service.create_reservation(
            db,
            _booking(
                villa.id, date(2030, 7, 1), date(2030, 7, 3),
                total_amount=Decimal("1000"), advance_amount=Decimal("300"),
            ),
        )

        updated = reservation_service.update_reservation(
            db, reservation.id, ReservationUpdate(total_amount=Decimal("2000"))
        )

        assert updated.total_amount == Decimal("2000")
        assert updated.advance_amount == Decimal("600")
        assert updated.remaining_amount == Decimal("1400")

    def test_switching_to_full_payment_collects_everything(self, db, villa):
        reservation = reservation_service.create_reservation(
            db,
            _booking(
                villa.id, date(2030, 7, 1), date(2030, 7, 3),
                total_amount=Decimal("1000"), advance_amount=Decimal("300"),
            ),
        )

        updated = reservation_service.update_reservation(
            db, reservation.id, ReservationUpdate(payment_type=PaymentType.FULL_PAYMENT)
        )

        assert updated.payment_type == PaymentType.FULL_PAYMENT
        assert updated.advance_amount == Decimal("1000")
        assert updated.remaining_amount == Decimal("0")

    def test_same_payment_type_keeps_advance(self, db, villa):
        reservation = reservation_service.create_reservation(
            db,
            _booking(
                villa.id, date(2030, 7, 1), date(2030, 7, 3),
                total_amount=Decimal("1000"), advance_amount=Decimal("250"),
            ),
        )

        updated = reservation_service.update_reservation(
            db, reservation.id, ReservationUpdate(payment_type=PaymentType.SPLIT_PAYMENT)
        )

        assert updated.advance_amount == Decimal("250")
        assert updated.remaining_amount == Decimal("750")


def _failing_calendar_write(*args, **kwargs):
    raise OperationalError("UPDATE calendar_days", {}, Exception("database is locked"))


class TestCalendarWriteFailures:
    def test_create_leaves_nothing_behind(self, db, villa, summer, monkeypatch):
        monkeypatch.setattr(availability_ledger, "reserve", _failing_calendar_write)

        with pytest.raises(CalendarSyncError) as exc_info:
            reservation_service.create_reservation(
                db, _booking(villa.id, date(2030, 7, 1), date(2030, 7, 4), booking_ref="VR-SYNC-1")
            )

        assert exc_info.value.details["booking_ref"] == "VR-SYNC-1"
        assert db.query(Reservation).count() == 0
        assert _calendar(db, villa.id, date(2030, 7, 1), date(2030, 7, 4)) == {}

    def test_cancel_keeps_reservation_live(self, db, villa, summer, monkeypatch):
        reservation = reservation_service.create_reservation(
            db, _booking(villa.id, date(2030, 7, 1), date(2030, 7, 4))
        )
        monkeypatch.setattr(availability_ledger, "release", _failing_calendar_write)

        with pytest.raises(CalendarSyncError):
            reservation_service.update_status(db, reservation.id, ReservationStatus.CANCELLED)

        stored = reservation_service.get_reservation(db, reservation.id)
        assert stored.status == ReservationStatus.PENDING
        assert stored.cancelled_at is None
        rows = _calendar(db, villa.id, date(2030, 7, 1), date(2030, 7, 3))
        assert all(r.status == CalendarStatus.RESERVED for r in rows.values())

    def test_delete_keeps_reservation(self, db, villa, summer, monkeypatch):
        reservation = reservation_service.create_reservation(
            db, _booking(villa.id, date(2030, 7, 1), date(2030, 7, 4))
        )
        monkeypatch.setattr(availability_ledger, "release", _failing_calendar_write)

        with pytest.raises(CalendarSyncError):
            reservation_service.delete_reservation(db, reservation.id)

        stored = reservation_service.get_reservation(db, reservation.id)
        assert stored.status == ReservationStatus.PENDING
        rows = _calendar(db, villa.id, date(2030, 7, 1), date(2030, 7, 3))
        assert all(r.status == CalendarStatus.RESERVED for r in rows.values())


class TestReporting:
    def test_stats(self, db, villa):
        amounts = [Decimal("1000"), Decimal("3000"), Decimal("2000")]
        created = [
            reservation_service.create_reservation(
                db,
                _booking(villa.id, date(2030, 7, 1 + i * 5), date(2030, 7, 3 + i * 5), total_amount=amount),
            )
            for i, amount in enumerate(amounts)
        ]
        reservation_service.update_status(db, created[0].id, ReservationStatus.COMPLETED)
        reservation_service.update_status(db, created[1].id, ReservationStatus.CANCELLED)

        stats = reservation_service.get_reservation_stats(db)

        assert stats.total_reservations == 3
        assert stats.pending_reservations == 1
        assert stats.completed_reservations == 1
        assert stats.cancelled_reservations == 1
        assert stats.confirmed_reservations == 0
        assert stats.total_revenue == Decimal("1000")
        assert stats.average_booking_value == Decimal("2000")

    def test_stats_without_reservations(self, db):
        stats = reservation_service.get_reservation_stats(db)

        assert stats.total_reservations == 0
        assert stats.total_revenue == Decimal("0")
        assert stats.average_booking_value == Decimal("0")

    def test_upcoming_lists_confirmed_checkins_this_week(self, db, villa):
        today = date.today()
        soon = reservation_service.create_reservation(
            db, _booking(villa.id, today + timedelta(days=2), today + timedelta(days=4), total_amount=Decimal("500"))
        )
        later = reservation_service.create_reservation(
            db, _booking(villa.id, today + timedelta(days=20), today + timedelta(days=22), total_amount=Decimal("500"))
        )
        pending = reservation_service.create_reservation(
            db, _booking(villa.id, today + timedelta(days=5), today + timedelta(days=6), total_amount=Decimal("500"))
        )
        for reservation in (soon, later):
            reservation_service.update_status(db, reservation.id, ReservationStatus.CONFIRMED)

        upcoming = reservation_service.get_upcoming_reservations(db)

        assert [r.id for r in upcoming] == [soon.id]
        assert pending.status == ReservationStatus.PENDING

    def test_generated_booking_refs_are_unique(self):
        refs = {reservation_service.generate_booking_ref(7) for _ in range(50)}

        assert len(refs) > 1
        assert all(ref.startswith("VR-7-") for ref in refs)
