from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date, timedelta

from villa_admin.db.database import get_db
from villa_admin import crud
from villa_admin.core.config import settings
from villa_admin.schemas.calendar import (
    CalendarDay, CalendarRange, SpecialOfferRange, CalendarUpdateResult,
    AvailabilityResponse, CalendarPopulateResult, ReconcileReport
)
from villa_admin.schemas.pricing import PriceResponse, Quote
from villa_admin.services import availability_ledger, calendar_maintenance, rate_resolver
from villa_admin.services.availability_ledger import UNSET

router = APIRouter()


def _get_villa_or_404(db: Session, villa_id: int):
    villa = crud.villa.get(db, villa_id)
    if not villa:
        raise HTTPException(status_code=404, detail="Villa not found")
    return villa


# Calendar
@router.get("/{villa_id}/calendar", response_model=List[CalendarDay])
def get_calendar(
    villa_id: int,
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    db: Session = Depends(get_db)
):
    """Calendar days of a villa, defaults to the next 30 days"""
    _get_villa_or_404(db, villa_id)
    start_date = start_date or date.today()
    end_date = end_date or start_date + timedelta(days=29)
    return availability_ledger.get_calendar(db, villa_id, start_date, end_date)


@router.post("/{villa_id}/calendar/mark-available", response_model=CalendarUpdateResult)
def mark_available(villa_id: int, range_in: CalendarRange, db: Session = Depends(get_db)):
    updated = availability_ledger.mark_available(db, villa_id, range_in.start_date, range_in.end_date)
    return CalendarUpdateResult(
        villa_id=villa_id, start_date=range_in.start_date, end_date=range_in.end_date, updated_rows=updated
    )


@router.post("/{villa_id}/calendar/mark-blocked", response_model=CalendarUpdateResult)
def mark_blocked(villa_id: int, range_in: CalendarRange, db: Session = Depends(get_db)):
    """Block a range for maintenance or owner use"""
    note = range_in.note if range_in.note is not None else UNSET
    updated = availability_ledger.mark_blocked(db, villa_id, range_in.start_date, range_in.end_date, note=note)
    return CalendarUpdateResult(
        villa_id=villa_id, start_date=range_in.start_date, end_date=range_in.end_date, updated_rows=updated
    )


@router.post("/{villa_id}/calendar/special-offer", response_model=CalendarUpdateResult)
def set_special_offer(villa_id: int, offer_in: SpecialOfferRange, db: Session = Depends(get_db)):
    """Tag a range as special offer, optionally with an override nightly price"""
    updated = availability_ledger.mark_special_offer(
        db, villa_id, offer_in.start_date, offer_in.end_date, price=offer_in.price
    )
    return CalendarUpdateResult(
        villa_id=villa_id, start_date=offer_in.start_date, end_date=offer_in.end_date, updated_rows=updated
    )


@router.delete("/{villa_id}/calendar/special-offer", response_model=CalendarUpdateResult)
def clear_special_offer(
    villa_id: int,
    start_date: date = Query(...),
    end_date: date = Query(...),
    db: Session = Depends(get_db)
):
    updated = availability_ledger.clear_special_offer(db, villa_id, start_date, end_date)
    return CalendarUpdateResult(villa_id=villa_id, start_date=start_date, end_date=end_date, updated_rows=updated)


@router.post("/{villa_id}/calendar/populate", response_model=CalendarPopulateResult)
def populate_calendar(
    villa_id: int,
    start_date: Optional[date] = Query(None),
    days: int = Query(settings.CALENDAR_WINDOW_DAYS, ge=1, le=settings.CALENDAR_MAX_BULK_DAYS),
    db: Session = Depends(get_db)
):
    """Create missing calendar days for the rolling window"""
    _get_villa_or_404(db, villa_id)
    created = calendar_maintenance.ensure_calendar_window(db, villa_id, start=start_date, days=days)
    return CalendarPopulateResult(villa_id=villa_id, created_rows=created)


@router.post("/{villa_id}/calendar/reconcile", response_model=ReconcileReport)
def reconcile_calendar(
    villa_id: int,
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    db: Session = Depends(get_db)
):
    """Re-derive calendar statuses from the reservations"""
    if start_date and end_date:
        availability_ledger.validate_bulk_range(start_date, end_date)
    return calendar_maintenance.reconcile_calendar(db, villa_id, start_date, end_date)


# Availability and pricing
@router.get("/{villa_id}/availability", response_model=AvailabilityResponse)
def check_availability(
    villa_id: int,
    start_date: date = Query(..., description="Check-in date"),
    end_date: date = Query(..., description="Checkout date"),
    exclude_reservation_id: Optional[int] = Query(None),
    db: Session = Depends(get_db)
):
    """Check whether the stay [start_date, end_date) is free"""
    _get_villa_or_404(db, villa_id)
    availability_ledger.validate_stay_range(start_date, end_date)
    conflicts = availability_ledger.find_conflicts(
        db, villa_id, start_date, end_date, exclude_reservation_id=exclude_reservation_id
    )
    return AvailabilityResponse(
        villa_id=villa_id,
        start_date=start_date,
        end_date=end_date,
        available=not conflicts,
        conflicting_booking_refs=[r.booking_ref for r in conflicts],
    )


@router.get("/{villa_id}/price", response_model=PriceResponse)
def get_price(villa_id: int, day: date = Query(..., alias="date"), db: Session = Depends(get_db)):
    """Nightly price for a single date"""
    _get_villa_or_404(db, villa_id)
    night = rate_resolver.resolve_with_source(db, villa_id, day)
    return PriceResponse(
        villa_id=villa_id,
        date=night.date,
        price=night.price,
        source=night.source,
        available=night.price is not None,
    )


@router.get("/{villa_id}/quote", response_model=Quote)
def get_quote(
    villa_id: int,
    start_date: date = Query(...),
    end_date: date = Query(...),
    db: Session = Depends(get_db)
):
    """Per-night price breakdown; total is null when a night has no price"""
    return rate_resolver.quote(db, villa_id, start_date, end_date)
