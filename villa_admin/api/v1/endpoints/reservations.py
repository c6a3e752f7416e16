from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from villa_admin.db.database import get_db
from villa_admin import crud
from villa_admin.models.reservation import ReservationStatus
from villa_admin.schemas.reservation import (
    Reservation, ReservationCreate, ReservationUpdate, ReservationStatusUpdate,
    ReservationFilters, ReservationStats
)
from villa_admin.services import reservation_service

router = APIRouter()


@router.get("/", response_model=List[Reservation])
def get_reservations(
    villa_id: Optional[int] = Query(None),
    status: Optional[ReservationStatus] = Query(None),
    start_date: Optional[date] = Query(None, description="Check-in on or after"),
    end_date: Optional[date] = Query(None, description="Checkout on or before"),
    customer_email: Optional[str] = Query(None),
    booking_ref: Optional[str] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db)
):
    """List reservations with optional filters"""
    filters = ReservationFilters(
        villa_id=villa_id,
        status=status,
        start_date=start_date,
        end_date=end_date,
        customer_email=customer_email,
        booking_ref=booking_ref,
    )
    return crud.reservation.filter_reservations(db, filters=filters, skip=skip, limit=limit)


@router.post("/", response_model=Reservation, status_code=201)
def create_reservation(reservation_in: ReservationCreate, db: Session = Depends(get_db)):
    """Create a reservation and reserve its nights in the calendar"""
    return reservation_service.create_reservation(db, reservation_in)


@router.get("/stats", response_model=ReservationStats)
def get_reservation_stats(db: Session = Depends(get_db)):
    return reservation_service.get_reservation_stats(db)


@router.get("/upcoming", response_model=List[Reservation])
def get_upcoming_reservations(days: Optional[int] = Query(None, ge=0, le=365), db: Session = Depends(get_db)):
    """Confirmed reservations checking in soon"""
    return reservation_service.get_upcoming_reservations(db, days=days)


@router.get("/by-ref/{booking_ref}", response_model=Reservation)
def get_reservation_by_ref(booking_ref: str, db: Session = Depends(get_db)):
    reservation = crud.reservation.get_by_booking_ref(db, booking_ref=booking_ref)
    if not reservation:
        raise HTTPException(status_code=404, detail="Reservation not found")
    return reservation


@router.get("/{reservation_id}", response_model=Reservation)
def get_reservation(reservation_id: int, db: Session = Depends(get_db)):
    reservation = crud.reservation.get(db, reservation_id)
    if not reservation:
        raise HTTPException(status_code=404, detail="Reservation not found")
    return reservation


@router.put("/{reservation_id}", response_model=Reservation)
def update_reservation(reservation_id: int, reservation_in: ReservationUpdate, db: Session = Depends(get_db)):
    """Edit a reservation; date changes move its calendar nights"""
    return reservation_service.update_reservation(db, reservation_id, reservation_in)


@router.patch("/{reservation_id}/status", response_model=Reservation)
def update_reservation_status(
    reservation_id: int,
    status_in: ReservationStatusUpdate,
    db: Session = Depends(get_db)
):
    """Change reservation status; cancelling frees the calendar"""
    return reservation_service.update_status(
        db, reservation_id, status_in.status, cancellation_reason=status_in.cancellation_reason
    )


@router.delete("/{reservation_id}")
def delete_reservation(reservation_id: int, db: Session = Depends(get_db)):
    booking_ref = reservation_service.delete_reservation(db, reservation_id)
    return {"message": f"Reservation {booking_ref} deleted successfully"}
