from typing import List, Optional
from datetime import datetime, time
from sqlalchemy.orm import Session
from sqlalchemy import func, or_

from villa_admin.crud.base import CRUDBase
from villa_admin.models.customer import Customer, CustomerStatus
from villa_admin.schemas.customer import CustomerCreate, CustomerUpdate, CustomerFilters, CustomerStats


class CRUDCustomer(CRUDBase[Customer, CustomerCreate, CustomerUpdate]):
    def filter_customers(
        self, db: Session, *, filters: CustomerFilters, skip: int = 0, limit: Optional[int] = 100
    ) -> List[Customer]:
        query = db.query(self.model)
        if filters.status:
            query = query.filter(self.model.status == filters.status)
        if filters.villa_id:
            query = query.filter(self.model.interested_villa_id == filters.villa_id)
        if filters.search_term:
            term = f"%{filters.search_term.strip()}%"
            query = query.filter(
                or_(
                    self.model.fullname.ilike(term),
                    self.model.email.ilike(term),
                    self.model.phone.ilike(term),
                )
            )
        if filters.date_from:
            query = query.filter(self.model.created_at >= datetime.combine(filters.date_from, time.min))
        if filters.date_to:
            query = query.filter(self.model.created_at <= datetime.combine(filters.date_to, time.max))
        return query.order_by(self.model.created_at.desc(), self.model.id.desc()).offset(skip).limit(limit).all()

    def get_stats(self, db: Session, *, today: datetime = None) -> CustomerStats:
        today = today or datetime.utcnow()
        rows = db.query(self.model.status, func.count(self.model.id)).group_by(self.model.status).all()
        by_status = {s.value: 0 for s in CustomerStatus}
        for status, count in rows:
            by_status[status.value] = count
        total = sum(by_status.values())

        month_start = datetime(today.year, today.month, 1)
        new_this_month = db.query(func.count(self.model.id)).filter(self.model.created_at >= month_start).scalar() or 0

        conversion_rate = 0.0
        if total > 0:
            conversion_rate = round(by_status[CustomerStatus.BOOKED.value] / total * 100, 2)

        return CustomerStats(
            total=total,
            by_status=by_status,
            new_this_month=new_this_month,
            conversion_rate=conversion_rate,
        )


customer = CRUDCustomer(Customer)
