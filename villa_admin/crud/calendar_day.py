from typing import Dict, List
from datetime import date
from sqlalchemy.orm import Session

from villa_admin.crud.base import CRUDBase
from villa_admin.models.calendar import CalendarDay, EventType
from villa_admin.schemas.calendar import CalendarDay as CalendarDaySchema


class CRUDCalendarDay(CRUDBase[CalendarDay, CalendarDaySchema, CalendarDaySchema]):
    def get_range(self, db: Session, *, villa_id: int, start_date: date, end_date: date) -> List[CalendarDay]:
        """Rows for the closed interval [start_date, end_date], ordered by date."""
        return (
            db.query(self.model)
            .filter(
                self.model.villa_id == villa_id,
                self.model.date >= start_date,
                self.model.date <= end_date,
            )
            .order_by(self.model.date)
            .all()
        )

    def get_range_by_date(self, db: Session, *, villa_id: int, start_date: date, end_date: date) -> Dict[date, CalendarDay]:
        return {row.date: row for row in self.get_range(db, villa_id=villa_id, start_date=start_date, end_date=end_date)}

    def get_special_offers(self, db: Session, *, villa_id: int, start_date: date, end_date: date) -> Dict[date, CalendarDay]:
        rows = (
            db.query(self.model)
            .filter(
                self.model.villa_id == villa_id,
                self.model.date >= start_date,
                self.model.date <= end_date,
                self.model.event_type == EventType.SPECIAL_OFFER,
                self.model.price.isnot(None),
            )
            .all()
        )
        return {row.date: row for row in rows}


calendar_day = CRUDCalendarDay(CalendarDay)
