# File: villa_admin/services/calendar_maintenance.py
from datetime import date, timedelta
from typing import Optional, Set
from sqlalchemy.orm import Session
import logging

from villa_admin import crud
from villa_admin.core.config import settings
from villa_admin.core.exceptions import NotFoundError
from villa_admin.db.database import SessionLocal
from villa_admin.models.calendar import CalendarDay, CalendarStatus, EventType
from villa_admin.schemas.calendar import ReconcileReport
from villa_admin.services.availability_ledger import iter_days, iter_nights

logger = logging.getLogger(__name__)


def ensure_calendar_window(
    db: Session,
    villa_id: int,
    start: Optional[date] = None,
    days: Optional[int] = None,
    commit: bool = True,
) -> int:
    """Create the missing AVAILABLE rows of the rolling window; returns how many were created."""
    start = start or date.today()
    days = days or settings.CALENDAR_WINDOW_DAYS
    end = start + timedelta(days=days - 1)

    existing = {
        row.date
        for row in crud.calendar_day.get_range(db, villa_id=villa_id, start_date=start, end_date=end)
    }
    created = 0
    for day in iter_days(start, end):
        if day not in existing:
            db.add(CalendarDay(villa_id=villa_id, date=day, status=CalendarStatus.AVAILABLE))
            created += 1

    if commit:
        db.commit()
    else:
        db.flush()
    if created:
        logger.info(f"Populated {created} calendar day(s) for villa {villa_id} ({start} - {end})")
    return created


def reconcile_calendar(
    db: Session,
    villa_id: int,
    start: Optional[date] = None,
    end: Optional[date] = None,
    commit: bool = True,
) -> ReconcileReport:
    """
    Re-derive CalendarDay.status and check-in/checkout flags from live reservations.

    Reservations are the record of truth: covered nights become RESERVED,
    RESERVED rows no longer covered become AVAILABLE, BLOCKED and PENDING rows
    are left alone unless a reservation covers them. SPECIAL_OFFER tags are
    never replaced by check-in/checkout flags.
    """
    if not crud.villa.get(db, villa_id):
        raise NotFoundError("Villa", villa_id)
    start = start or date.today()
    end = end or start + timedelta(days=settings.CALENDAR_WINDOW_DAYS - 1)

    reserved: Set[date] = set()
    checkins: Set[date] = set()
    checkouts: Set[date] = set()
    for reservation in crud.reservation.get_touching(db, villa_id=villa_id, start_date=start, end_date=end):
        reserved.update(iter_nights(reservation.start_date, reservation.end_date))
        checkins.add(reservation.start_date)
        checkouts.add(reservation.end_date)

    rows = crud.calendar_day.get_range_by_date(db, villa_id=villa_id, start_date=start, end_date=end)
    report = ReconcileReport(villa_id=villa_id, start_date=start, end_date=end)

    # Booked nights must always have a row
    for day in sorted(reserved | checkins | checkouts):
        if start <= day <= end and day not in rows:
            row = CalendarDay(villa_id=villa_id, date=day, status=CalendarStatus.AVAILABLE)
            db.add(row)
            rows[day] = row
            report.created_rows += 1

    for day, row in rows.items():
        report.checked_rows += 1
        status = row.status
        if day in reserved:
            status = CalendarStatus.RESERVED
        elif status == CalendarStatus.RESERVED:
            status = CalendarStatus.AVAILABLE

        event_type = row.event_type
        if event_type != EventType.SPECIAL_OFFER:
            if day in checkins:
                event_type = EventType.CHECKIN
            elif day in checkouts:
                event_type = EventType.CHECKOUT
            else:
                event_type = None

        if status != row.status or event_type != row.event_type:
            row.status = status
            row.event_type = event_type
            report.fixed_rows += 1

    if commit:
        db.commit()
    else:
        db.flush()
    if report.fixed_rows or report.created_rows:
        logger.info(
            f"Reconciled calendar of villa {villa_id} ({start} - {end}): "
            f"{report.fixed_rows} fixed, {report.created_rows} created"
        )
    return report


def run_daily_calendar_maintenance():
    """Run daily: keep the rolling window populated and repair drift for every active villa"""
    db = SessionLocal()
    try:
        villas = crud.villa.get_active(db)
        logger.info(f"Calendar maintenance for {len(villas)} active villa(s)")

        for villa in villas:
            try:
                ensure_calendar_window(db, villa.id)
                reconcile_calendar(db, villa.id)
            except Exception as e:
                db.rollback()
                logger.error(f"Calendar maintenance failed for villa {villa.id}: {e}")

    except Exception as e:
        logger.error(f"Error in calendar maintenance job: {e}")
    finally:
        db.close()
