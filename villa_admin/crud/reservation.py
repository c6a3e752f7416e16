from typing import List, Optional
from datetime import date
from sqlalchemy.orm import Session, joinedload

from villa_admin.crud.base import CRUDBase
from villa_admin.models.reservation import Reservation, ReservationStatus
from villa_admin.schemas.reservation import ReservationCreate, ReservationUpdate, ReservationFilters


class CRUDReservation(CRUDBase[Reservation, ReservationCreate, ReservationUpdate]):
    def get(self, db: Session, id: int) -> Optional[Reservation]:
        return (
            db.query(self.model)
            .options(joinedload(self.model.villa))
            .filter(self.model.id == id)
            .first()
        )

    def get_by_booking_ref(self, db: Session, *, booking_ref: str) -> Optional[Reservation]:
        return (
            db.query(self.model)
            .options(joinedload(self.model.villa))
            .filter(self.model.booking_ref == booking_ref)
            .first()
        )

    def get_active_by_villa(self, db: Session, *, villa_id: int) -> List[Reservation]:
        return (
            db.query(self.model)
            .filter(
                self.model.villa_id == villa_id,
                self.model.status != ReservationStatus.CANCELLED,
            )
            .order_by(self.model.start_date)
            .all()
        )

    def get_overlapping(
        self,
        db: Session,
        *,
        villa_id: int,
        start_date: date,
        end_date: date,
        exclude_reservation_id: Optional[int] = None,
    ) -> List[Reservation]:
        """Non-cancelled reservations whose [start, end) overlaps [start_date, end_date)."""
        query = db.query(self.model).filter(
            self.model.villa_id == villa_id,
            self.model.status != ReservationStatus.CANCELLED,
            self.model.start_date < end_date,
            self.model.end_date > start_date,
        )
        if exclude_reservation_id is not None:
            query = query.filter(self.model.id != exclude_reservation_id)
        return query.order_by(self.model.start_date).all()

    def get_touching(self, db: Session, *, villa_id: int, start_date: date, end_date: date) -> List[Reservation]:
        """Non-cancelled reservations with a night, check-in or checkout inside [start_date, end_date]."""
        return (
            db.query(self.model)
            .filter(
                self.model.villa_id == villa_id,
                self.model.status != ReservationStatus.CANCELLED,
                self.model.start_date <= end_date,
                self.model.end_date >= start_date,
            )
            .all()
        )

    def filter_reservations(self, db: Session, *, filters: ReservationFilters, skip: int = 0, limit: int = 100) -> List[Reservation]:
        query = db.query(self.model).options(joinedload(self.model.villa))
        if filters.villa_id:
            query = query.filter(self.model.villa_id == filters.villa_id)
        if filters.status:
            query = query.filter(self.model.status == filters.status)
        if filters.start_date:
            query = query.filter(self.model.start_date >= filters.start_date)
        if filters.end_date:
            query = query.filter(self.model.end_date <= filters.end_date)
        if filters.customer_email:
            query = query.filter(self.model.customer_email.ilike(f"%{filters.customer_email}%"))
        if filters.booking_ref:
            query = query.filter(self.model.booking_ref.ilike(f"%{filters.booking_ref}%"))
        return query.order_by(self.model.created_at.desc(), self.model.id.desc()).offset(skip).limit(limit).all()

    def get_upcoming(self, db: Session, *, start: date, end: date) -> List[Reservation]:
        return (
            db.query(self.model)
            .options(joinedload(self.model.villa))
            .filter(
                self.model.status == ReservationStatus.CONFIRMED,
                self.model.start_date >= start,
                self.model.start_date <= end,
            )
            .order_by(self.model.start_date)
            .all()
        )


reservation = CRUDReservation(Reservation)
