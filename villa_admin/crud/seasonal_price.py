from typing import List, Optional
from datetime import date
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
import logging

from villa_admin.crud.base import CRUDBase
from villa_admin.core.exceptions import (
    DuplicateDateRangeError, InvalidDateRangeError, NotFoundError, SeasonalPriceOverlapError,
)
from villa_admin.models.seasonal_price import SeasonalPrice
from villa_admin.models.villa import Villa
from villa_admin.schemas.pricing import SeasonalPriceCreate, SeasonalPriceUpdate

logger = logging.getLogger(__name__)


class CRUDSeasonalPrice(CRUDBase[SeasonalPrice, SeasonalPriceCreate, SeasonalPriceUpdate]):
    def get_by_villa(self, db: Session, *, villa_id: int, active_only: bool = False) -> List[SeasonalPrice]:
        query = db.query(self.model).filter(self.model.villa_id == villa_id)
        if active_only:
            query = query.filter(self.model.is_active == True)
        return query.order_by(self.model.start_date, self.model.id).all()

    def get_active_in_range(self, db: Session, *, villa_id: int, start_date: date, end_date: date) -> List[SeasonalPrice]:
        """Active rules intersecting the closed interval [start_date, end_date]."""
        return (
            db.query(self.model)
            .filter(
                self.model.villa_id == villa_id,
                self.model.is_active == True,
                self.model.start_date <= end_date,
                self.model.end_date >= start_date,
            )
            .all()
        )

    def create(self, db: Session, *, obj_in: SeasonalPriceCreate) -> SeasonalPrice:
        if not db.query(Villa.id).filter(Villa.id == obj_in.villa_id).first():
            raise NotFoundError("Villa", obj_in.villa_id)
        self._validate_range(
            db,
            villa_id=obj_in.villa_id,
            start_date=obj_in.start_date,
            end_date=obj_in.end_date,
            is_active=obj_in.is_active,
        )
        db_obj = self.model(**obj_in.dict())
        db.add(db_obj)
        self._commit(db, obj_in.villa_id, obj_in.start_date, obj_in.end_date)
        db.refresh(db_obj)
        logger.info(
            f"Seasonal price '{db_obj.season_name}' created for villa {db_obj.villa_id}: "
            f"{db_obj.start_date} - {db_obj.end_date} @ {db_obj.nightly_price}"
        )
        return db_obj

    def update(self, db: Session, *, db_obj: SeasonalPrice, obj_in: SeasonalPriceUpdate) -> SeasonalPrice:
        update_data = obj_in.dict(exclude_unset=True)
        start_date = update_data.get("start_date", db_obj.start_date)
        end_date = update_data.get("end_date", db_obj.end_date)
        is_active = update_data.get("is_active", db_obj.is_active)
        if start_date is None or end_date is None:
            raise InvalidDateRangeError(db_obj.start_date, db_obj.end_date, "Season dates cannot be cleared")
        self._validate_range(
            db,
            villa_id=db_obj.villa_id,
            start_date=start_date,
            end_date=end_date,
            is_active=is_active,
            exclude_id=db_obj.id,
        )
        if "nightly_price" in update_data and "weekly_price" not in update_data and update_data["nightly_price"] is not None:
            # Keep the conventional weekly rate in step when only the nightly rate changes
            if db_obj.weekly_price is not None and db_obj.weekly_price == db_obj.nightly_price * 7:
                update_data["weekly_price"] = update_data["nightly_price"] * 7
        for field, value in update_data.items():
            setattr(db_obj, field, value)
        self._commit(db, db_obj.villa_id, start_date, end_date)
        db.refresh(db_obj)
        return db_obj

    def _validate_range(
        self,
        db: Session,
        *,
        villa_id: int,
        start_date: date,
        end_date: date,
        is_active: bool,
        exclude_id: Optional[int] = None,
    ) -> None:
        if end_date < start_date:
            raise InvalidDateRangeError(start_date, end_date, "Season end date must not be before its start date")

        duplicate = db.query(self.model).filter(
            self.model.villa_id == villa_id,
            self.model.start_date == start_date,
            self.model.end_date == end_date,
        )
        if exclude_id is not None:
            duplicate = duplicate.filter(self.model.id != exclude_id)
        if duplicate.first():
            raise DuplicateDateRangeError(villa_id, start_date, end_date)

        if not is_active:
            return
        overlapping = self.get_active_in_range(db, villa_id=villa_id, start_date=start_date, end_date=end_date)
        overlapping = [p for p in overlapping if p.id != exclude_id]
        if overlapping:
            raise SeasonalPriceOverlapError(
                villa_id,
                [f"{p.season_name} ({p.start_date} - {p.end_date})" for p in overlapping],
            )

    def _commit(self, db: Session, villa_id: int, start_date: date, end_date: date) -> None:
        try:
            db.commit()
        except IntegrityError:
            # Unique (villa_id, start_date, end_date) hit by a concurrent insert
            db.rollback()
            raise DuplicateDateRangeError(villa_id, start_date, end_date)


seasonal_price = CRUDSeasonalPrice(SeasonalPrice)
