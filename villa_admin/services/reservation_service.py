# File: villa_admin/services/reservation_service.py
"""
Reservation lifecycle.

Every write here touches two tables: the reservation row and the calendar
rows of its stay. Both are flushed in one session and committed once, so a
failure on either side rolls back the pair. Drift that slips through anyway
is repaired by ``calendar_maintenance.reconcile_calendar``.
"""
from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
import logging
import secrets

from villa_admin import crud
from villa_admin.core.config import settings
from villa_admin.core.exceptions import (
    CalendarSyncError,
    DuplicateBookingRefError,
    MinimumStayError,
    NotFoundError,
    ReservationConflictError,
    ValidationError,
    VillaAdminError,
)
from villa_admin.models.reservation import PaymentType, Reservation, ReservationStatus
from villa_admin.models.villa import Villa, VillaStatus
from villa_admin.schemas.reservation import ReservationCreate, ReservationStats, ReservationUpdate
from villa_admin.services import availability_ledger, calendar_maintenance, rate_resolver

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def _money(value) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def generate_booking_ref(villa_id: int) -> str:
    """e.g. VR-12-20250701143005-9F3A"""
    stamp = datetime.utcnow().strftime("%Y%m%d%H%M%S")
    return f"{settings.BOOKING_REF_PREFIX}-{villa_id}-{stamp}-{secrets.token_hex(2).upper()}"


def _validate_stay(villa: Villa, start_date: date, end_date: date, guest_count: int) -> None:
    availability_ledger.validate_stay_range(start_date, end_date)
    nights = (end_date - start_date).days
    if nights < (villa.minimum_stay or 1):
        raise MinimumStayError(nights, villa.minimum_stay)
    if guest_count > villa.max_guests:
        raise ValidationError(
            f"Villa {villa.id} accepts at most {villa.max_guests} guests, got {guest_count}",
            {"guest_count": guest_count, "max_guests": villa.max_guests},
        )


def _resolve_amounts(
    villa: Villa,
    payment_type: PaymentType,
    total: Decimal,
    advance: Optional[Decimal],
    remaining: Optional[Decimal],
):
    """Fill in advance/remaining and check that total = advance + remaining."""
    total = _money(total)
    if advance is None:
        if payment_type == PaymentType.FULL_PAYMENT:
            advance = total
        else:
            advance = total * Decimal(villa.advance_payment_rate or 0) / Decimal(100)
    advance = _money(advance)

    if advance > total:
        raise ValidationError(
            "Advance amount cannot exceed the total amount",
            {"total_amount": str(total), "advance_amount": str(advance)},
        )

    expected_remaining = total - advance
    if remaining is None:
        remaining = expected_remaining
    elif _money(remaining) != expected_remaining:
        raise ValidationError(
            "Remaining amount must equal total amount minus advance amount",
            {"expected_remaining_amount": str(expected_remaining), "remaining_amount": str(remaining)},
        )
    return total, advance, _money(remaining)


def _lock_and_check(
    db: Session,
    villa_id: int,
    start_date: date,
    end_date: date,
    exclude_reservation_id: Optional[int] = None,
) -> None:
    """Serialize bookings per villa, then reject overlapping stays."""
    crud.villa.get_for_update(db, villa_id)
    conflicts = availability_ledger.find_conflicts(
        db, villa_id, start_date, end_date, exclude_reservation_id=exclude_reservation_id
    )
    if conflicts:
        logger.warning(
            f"Reservation conflict on villa {villa_id} ({start_date} - {end_date}): "
            f"{[r.booking_ref for r in conflicts]}"
        )
        raise ReservationConflictError(villa_id, start_date, end_date, [r.booking_ref for r in conflicts])


def _commit_with_calendar(db: Session, booking_ref: str, action: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Calendar update failed while trying to {action} reservation {booking_ref}: {e}")
        raise CalendarSyncError(
            f"Could not {action} reservation {booking_ref}: calendar update failed",
            {"booking_ref": booking_ref},
        ) from e


def _release_and_repair(db: Session, villa_id: int, start_date: date, end_date: date) -> None:
    """Free a stay and restore turnover flags of stays sharing its edge days."""
    availability_ledger.release(db, villa_id, start_date, end_date, commit=False)
    db.flush()
    calendar_maintenance.reconcile_calendar(db, villa_id, start_date, end_date, commit=False)


def get_reservation(db: Session, reservation_id: int) -> Reservation:
    reservation = crud.reservation.get(db, reservation_id)
    if not reservation:
        raise NotFoundError("Reservation", reservation_id)
    return reservation


def create_reservation(db: Session, data: ReservationCreate) -> Reservation:
    """Validate, lock the villa, check availability, then write the booking and its calendar rows."""
    villa = crud.villa.get(db, data.villa_id)
    if not villa:
        raise NotFoundError("Villa", data.villa_id)
    if villa.status != VillaStatus.ACTIVE:
        raise ValidationError(f"Villa {villa.id} is not open for reservations", {"villa_id": villa.id})

    _validate_stay(villa, data.start_date, data.end_date, data.guest_count)

    total = data.total_amount
    if total is None:
        total = rate_resolver.total_for_range(db, villa.id, data.start_date, data.end_date)
    total, advance, remaining = _resolve_amounts(
        villa, data.payment_type, total, data.advance_amount, data.remaining_amount
    )

    booking_ref = data.booking_ref or generate_booking_ref(villa.id)
    if crud.reservation.get_by_booking_ref(db, booking_ref=booking_ref):
        raise DuplicateBookingRefError(booking_ref)

    try:
        _lock_and_check(db, villa.id, data.start_date, data.end_date)
    except VillaAdminError:
        db.rollback()
        raise

    fields = data.dict(exclude={"booking_ref", "total_amount", "advance_amount", "remaining_amount"})
    reservation = Reservation(
        **fields,
        booking_ref=booking_ref,
        total_amount=total,
        advance_amount=advance,
        remaining_amount=remaining,
        status=ReservationStatus.PENDING,
    )
    db.add(reservation)
    try:
        db.flush()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateBookingRefError(booking_ref) from e

    try:
        availability_ledger.reserve(db, villa.id, data.start_date, data.end_date, commit=False)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to reserve calendar for {booking_ref}: {e}")
        raise CalendarSyncError(
            f"Could not create reservation {booking_ref}: calendar update failed",
            {"booking_ref": booking_ref},
        ) from e
    _commit_with_calendar(db, booking_ref, "create")
    db.refresh(reservation)

    logger.info(
        f"Reservation {booking_ref} created for villa {villa.id}: "
        f"{data.start_date} - {data.end_date}, total {total} {settings.CURRENCY}"
    )
    return reservation


def update_reservation(db: Session, reservation_id: int, changes: ReservationUpdate) -> Reservation:
    reservation = get_reservation(db, reservation_id)
    villa = reservation.villa
    update_data = changes.dict(exclude_unset=True)

    new_start = update_data.get("start_date") or reservation.start_date
    new_end = update_data.get("end_date") or reservation.end_date
    guest_count = update_data.get("guest_count") or reservation.guest_count
    dates_changed = (new_start, new_end) != (reservation.start_date, reservation.end_date)

    if dates_changed or "guest_count" in update_data:
        _validate_stay(villa, new_start, new_end, guest_count)

    if {"total_amount", "advance_amount", "remaining_amount", "payment_type"} & update_data.keys():
        payment_type = update_data.get("payment_type") or reservation.payment_type
        total = update_data.get("total_amount", reservation.total_amount)
        advance = update_data.get("advance_amount")
        # A new total or payment type re-derives the advance unless one is given
        payment_changed = payment_type != reservation.payment_type
        if advance is None and "total_amount" not in update_data and not payment_changed:
            advance = reservation.advance_amount
        remaining = update_data.get("remaining_amount")
        total, advance, remaining = _resolve_amounts(villa, payment_type, total, advance, remaining)
        update_data.update(total_amount=total, advance_amount=advance, remaining_amount=remaining)

    is_live = reservation.status != ReservationStatus.CANCELLED
    old_start, old_end = reservation.start_date, reservation.end_date
    if dates_changed and is_live:
        try:
            _lock_and_check(db, villa.id, new_start, new_end, exclude_reservation_id=reservation.id)
        except VillaAdminError:
            db.rollback()
            raise

    for field, value in update_data.items():
        setattr(reservation, field, value)

    if dates_changed and is_live:
        try:
            db.flush()
            availability_ledger.release(db, villa.id, old_start, old_end, commit=False)
            availability_ledger.reserve(db, villa.id, new_start, new_end, commit=False)
            db.flush()
            calendar_maintenance.reconcile_calendar(
                db, villa.id, min(old_start, new_start), max(old_end, new_end), commit=False
            )
        except SQLAlchemyError as e:
            db.rollback()
            raise CalendarSyncError(
                f"Could not move reservation {reservation.booking_ref}: calendar update failed",
                {"booking_ref": reservation.booking_ref},
            ) from e
        logger.info(
            f"Reservation {reservation.booking_ref} moved from {old_start} - {old_end} "
            f"to {new_start} - {new_end}"
        )

    _commit_with_calendar(db, reservation.booking_ref, "update")
    db.refresh(reservation)
    return reservation


def update_status(
    db: Session,
    reservation_id: int,
    new_status: ReservationStatus,
    cancellation_reason: Optional[str] = None,
) -> Reservation:
    """
    Change the reservation status.

    Any transition is allowed. Cancelling frees the calendar; bringing a
    cancelled reservation back re-checks availability and re-reserves it.
    """
    reservation = get_reservation(db, reservation_id)
    old_status = reservation.status
    if old_status == new_status:
        if cancellation_reason is not None and new_status == ReservationStatus.CANCELLED:
            reservation.cancellation_reason = cancellation_reason
            db.commit()
            db.refresh(reservation)
        return reservation

    villa_id = reservation.villa_id
    try:
        if new_status == ReservationStatus.CANCELLED:
            reservation.status = new_status
            reservation.cancelled_at = datetime.utcnow()
            if cancellation_reason is not None:
                reservation.cancellation_reason = cancellation_reason
            db.flush()
            _release_and_repair(db, villa_id, reservation.start_date, reservation.end_date)

        elif old_status == ReservationStatus.CANCELLED:
            _lock_and_check(
                db, villa_id, reservation.start_date, reservation.end_date,
                exclude_reservation_id=reservation.id,
            )
            reservation.status = new_status
            reservation.cancelled_at = None
            availability_ledger.reserve(db, villa_id, reservation.start_date, reservation.end_date, commit=False)

        else:
            reservation.status = new_status
    except VillaAdminError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        raise CalendarSyncError(
            f"Could not change status of reservation {reservation.booking_ref}: calendar update failed",
            {"booking_ref": reservation.booking_ref},
        ) from e

    _commit_with_calendar(db, reservation.booking_ref, "update the status of")
    db.refresh(reservation)
    logger.info(f"Reservation {reservation.booking_ref} status {old_status.value} -> {new_status.value}")
    return reservation


def delete_reservation(db: Session, reservation_id: int) -> str:
    """Hard delete; a live reservation gives its nights back to the calendar."""
    reservation = get_reservation(db, reservation_id)
    booking_ref = reservation.booking_ref
    villa_id = reservation.villa_id
    start_date, end_date = reservation.start_date, reservation.end_date
    was_live = reservation.status != ReservationStatus.CANCELLED

    db.delete(reservation)
    try:
        db.flush()
        if was_live:
            _release_and_repair(db, villa_id, start_date, end_date)
    except SQLAlchemyError as e:
        db.rollback()
        raise CalendarSyncError(
            f"Could not delete reservation {booking_ref}: calendar update failed",
            {"booking_ref": booking_ref},
        ) from e
    _commit_with_calendar(db, booking_ref, "delete")

    logger.info(f"Reservation {booking_ref} deleted")
    return booking_ref


def get_reservation_stats(db: Session) -> ReservationStats:
    counts = dict(
        db.query(Reservation.status, func.count(Reservation.id))
        .group_by(Reservation.status)
        .all()
    )
    total = sum(counts.values())
    revenue = (
        db.query(func.sum(Reservation.total_amount))
        .filter(Reservation.status == ReservationStatus.COMPLETED)
        .scalar()
    )
    average = db.query(func.avg(Reservation.total_amount)).scalar()

    return ReservationStats(
        total_reservations=total,
        pending_reservations=counts.get(ReservationStatus.PENDING, 0),
        confirmed_reservations=counts.get(ReservationStatus.CONFIRMED, 0),
        completed_reservations=counts.get(ReservationStatus.COMPLETED, 0),
        cancelled_reservations=counts.get(ReservationStatus.CANCELLED, 0),
        total_revenue=_money(revenue or 0),
        average_booking_value=_money(average or 0),
    )


def get_upcoming_reservations(db: Session, days: Optional[int] = None) -> List[Reservation]:
    """Confirmed reservations checking in between today and ``days`` days from now."""
    days = days if days is not None else settings.UPCOMING_RESERVATION_DAYS
    today = date.today()
    return crud.reservation.get_upcoming(db, start=today, end=today + timedelta(days=days))
