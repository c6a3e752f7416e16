"""
Availability ledger: one CalendarDay row per villa per date.

Two range conventions live side by side here:

* reservation ranges are half-open, ``[start_date, end_date)``. The checkout
  day is not an occupied night, so a stay ending on day D and another one
  starting on day D do not conflict.
* bulk calendar edits are closed, ``[start_date, end_date]``, matching what an
  admin selects in the calendar.

The Reservation table is the record of truth for bookings. CalendarDay.status
is a display cache kept in step by ``reserve``/``release`` and repaired by
``calendar_maintenance.reconcile_calendar``.
"""
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, Iterator, List, Optional
from sqlalchemy.orm import Session
import logging

from villa_admin import crud
from villa_admin.core.config import settings
from villa_admin.core.exceptions import InvalidDateRangeError, NotFoundError, ValidationError
from villa_admin.models.calendar import CalendarDay, CalendarStatus, EventType
from villa_admin.models.reservation import Reservation

logger = logging.getLogger(__name__)

# Marks an argument the caller did not pass, so None can mean "clear"
UNSET = object()


def iter_nights(start_date: date, end_date: date) -> Iterator[date]:
    """Nights of a stay, [start_date, end_date)."""
    current = start_date
    while current < end_date:
        yield current
        current += timedelta(days=1)


def iter_days(start_date: date, end_date: date) -> Iterator[date]:
    """Every day of the closed interval [start_date, end_date]."""
    return iter_nights(start_date, end_date + timedelta(days=1))


def validate_stay_range(start_date: date, end_date: date) -> None:
    if end_date <= start_date:
        raise InvalidDateRangeError(
            start_date, end_date, "Checkout date must be after the check-in date"
        )
    nights = (end_date - start_date).days
    if nights > settings.CALENDAR_MAX_BULK_DAYS:
        raise ValidationError(
            f"Stays are limited to {settings.CALENDAR_MAX_BULK_DAYS} nights, got {nights}",
            {"nights": nights},
        )


def validate_bulk_range(start_date: date, end_date: date) -> None:
    if end_date < start_date:
        raise InvalidDateRangeError(start_date, end_date, "End date must not be before the start date")
    days = (end_date - start_date).days + 1
    if days > settings.CALENDAR_MAX_BULK_DAYS:
        raise ValidationError(
            f"Bulk calendar edits are limited to {settings.CALENDAR_MAX_BULK_DAYS} days, got {days}",
            {"days": days},
        )


def _ensure_villa(db: Session, villa_id: int) -> None:
    if not crud.villa.get(db, villa_id):
        raise NotFoundError("Villa", villa_id)


# ---------------------------------------------------------------------------
# Conflict detection
# ---------------------------------------------------------------------------

def find_conflicts(
    db: Session,
    villa_id: int,
    start_date: date,
    end_date: date,
    exclude_reservation_id: Optional[int] = None,
) -> List[Reservation]:
    """
    Non-cancelled reservations of the villa overlapping [start_date, end_date).

    The range is not validated here; zero-night and oversized stays are
    rejected by the callers (``validate_stay_range``).
    """
    return crud.reservation.get_overlapping(
        db,
        villa_id=villa_id,
        start_date=start_date,
        end_date=end_date,
        exclude_reservation_id=exclude_reservation_id,
    )


def check_conflict(
    db: Session,
    villa_id: int,
    start_date: date,
    end_date: date,
    exclude_reservation_id: Optional[int] = None,
) -> bool:
    """
    True when an existing non-cancelled reservation overlaps the requested stay.

    Overlap is ``existing.start < requested.end and existing.end > requested.start``.
    ``exclude_reservation_id`` leaves one reservation out, for edits.
    """
    return len(find_conflicts(db, villa_id, start_date, end_date, exclude_reservation_id)) > 0


def ranges_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """The same predicate for two half-open ranges held in memory."""
    return a_start < b_end and a_end > b_start


# ---------------------------------------------------------------------------
# Calendar rows
# ---------------------------------------------------------------------------

def get_calendar(db: Session, villa_id: int, start_date: date, end_date: date) -> List[CalendarDay]:
    validate_bulk_range(start_date, end_date)
    return crud.calendar_day.get_range(db, villa_id=villa_id, start_date=start_date, end_date=end_date)


def get_or_create_rows(db: Session, villa_id: int, start_date: date, end_date: date) -> Dict[date, CalendarDay]:
    """Rows for [start_date, end_date], creating AVAILABLE rows for missing dates."""
    rows = crud.calendar_day.get_range_by_date(db, villa_id=villa_id, start_date=start_date, end_date=end_date)
    for day in iter_days(start_date, end_date):
        if day not in rows:
            row = CalendarDay(villa_id=villa_id, date=day, status=CalendarStatus.AVAILABLE)
            db.add(row)
            rows[day] = row
    # Later range queries in this transaction must see the new rows
    db.flush()
    return rows


def mark_range(
    db: Session,
    villa_id: int,
    start_date: date,
    end_date: date,
    status: Optional[CalendarStatus] = None,
    event_type=UNSET,
    price=UNSET,
    note=UNSET,
    commit: bool = True,
) -> int:
    """
    Bulk edit every CalendarDay of [start_date, end_date] (inclusive).

    ``status=None`` leaves status untouched; ``event_type``, ``price`` and
    ``note`` are only written when passed (None clears them). Missing rows in
    the range are created. Returns the number of rows in the range.
    """
    validate_bulk_range(start_date, end_date)
    _ensure_villa(db, villa_id)
    if price is not UNSET and price is not None and Decimal(price) < 0:
        raise ValidationError("Price must not be negative")

    rows = get_or_create_rows(db, villa_id, start_date, end_date)
    for row in rows.values():
        if status is not None:
            row.status = status
        if event_type is not UNSET:
            row.event_type = event_type
        if price is not UNSET:
            row.price = price
        if note is not UNSET:
            row.note = note

    if commit:
        db.commit()
    logger.info(
        f"Calendar of villa {villa_id} updated for {start_date} - {end_date}: "
        f"{len(rows)} rows (status={status.value if status else 'unchanged'})"
    )
    return len(rows)


def mark_available(db: Session, villa_id: int, start_date: date, end_date: date, commit: bool = True) -> int:
    _warn_if_reserved(db, villa_id, start_date, end_date)
    return mark_range(
        db, villa_id, start_date, end_date,
        status=CalendarStatus.AVAILABLE, event_type=None, commit=commit,
    )


def mark_blocked(db: Session, villa_id: int, start_date: date, end_date: date, note=UNSET, commit: bool = True) -> int:
    return mark_range(
        db, villa_id, start_date, end_date,
        status=CalendarStatus.BLOCKED, note=note, commit=commit,
    )


def mark_special_offer(
    db: Session,
    villa_id: int,
    start_date: date,
    end_date: date,
    price: Optional[Decimal] = None,
    commit: bool = True,
) -> int:
    """Tag the range as SPECIAL_OFFER; ``price`` overrides the nightly rate when given."""
    return mark_range(
        db, villa_id, start_date, end_date,
        event_type=EventType.SPECIAL_OFFER,
        price=price if price is not None else UNSET,
        commit=commit,
    )


def clear_special_offer(db: Session, villa_id: int, start_date: date, end_date: date, commit: bool = True) -> int:
    """Drop the SPECIAL_OFFER tag in the range; status is left alone."""
    validate_bulk_range(start_date, end_date)
    _ensure_villa(db, villa_id)
    rows = crud.calendar_day.get_range(db, villa_id=villa_id, start_date=start_date, end_date=end_date)
    cleared = 0
    for row in rows:
        if row.event_type == EventType.SPECIAL_OFFER:
            row.event_type = None
            cleared += 1
    if commit:
        db.commit()
    logger.info(f"Cleared special offer on {cleared} day(s) of villa {villa_id}")
    return cleared


def _warn_if_reserved(db: Session, villa_id: int, start_date: date, end_date: date) -> None:
    booked = crud.reservation.get_overlapping(
        db, villa_id=villa_id, start_date=start_date, end_date=end_date + timedelta(days=1)
    )
    if booked:
        logger.warning(
            f"Marking villa {villa_id} available over live reservation(s) "
            f"{[r.booking_ref for r in booked]}; reconciliation will restore RESERVED"
        )


# ---------------------------------------------------------------------------
# Reservation side effects
# ---------------------------------------------------------------------------

def _flag(row: CalendarDay, event_type: EventType) -> None:
    # Special offers keep their tag, otherwise the override price is lost
    if row.event_type == EventType.SPECIAL_OFFER:
        return
    if event_type == EventType.CHECKOUT and row.event_type == EventType.CHECKIN:
        return
    row.event_type = event_type


def reserve(db: Session, villa_id: int, start_date: date, end_date: date, commit: bool = True) -> int:
    """
    Flip the nights of a stay to RESERVED and flag the check-in/checkout days.

    Returns the number of nights reserved.
    """
    validate_stay_range(start_date, end_date)
    rows = get_or_create_rows(db, villa_id, start_date, end_date)
    nights = 0
    for day in iter_nights(start_date, end_date):
        rows[day].status = CalendarStatus.RESERVED
        nights += 1
    _flag(rows[start_date], EventType.CHECKIN)
    _flag(rows[end_date], EventType.CHECKOUT)
    if commit:
        db.commit()
    logger.info(f"Reserved {nights} night(s) of villa {villa_id} from {start_date} to {end_date}")
    return nights


def release(db: Session, villa_id: int, start_date: date, end_date: date, commit: bool = True) -> int:
    """
    Give the nights of a stay back: RESERVED -> AVAILABLE.

    Blocked days stay blocked and missing rows are not created, so releasing
    an already available range changes nothing. Returns the rows changed.
    """
    validate_stay_range(start_date, end_date)
    rows = crud.calendar_day.get_range_by_date(db, villa_id=villa_id, start_date=start_date, end_date=end_date)
    changed = 0
    for day in iter_nights(start_date, end_date):
        row = rows.get(day)
        if row is not None and row.status == CalendarStatus.RESERVED:
            row.status = CalendarStatus.AVAILABLE
            changed += 1
    first, last = rows.get(start_date), rows.get(end_date)
    if first is not None and first.event_type == EventType.CHECKIN:
        first.event_type = None
    if last is not None and last.event_type == EventType.CHECKOUT:
        last.event_type = None
    if commit:
        db.commit()
    if changed:
        logger.info(f"Released {changed} night(s) of villa {villa_id} from {start_date} to {end_date}")
    return changed
