from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from villa_admin.crud.base import CRUDBase
from villa_admin.core.exceptions import ConflictError, DuplicateError, NotFoundError
from villa_admin.models.villa import Villa, VillaAmenity, VillaStatus, Tag
from villa_admin.models.reservation import Reservation
from villa_admin.schemas.villa import VillaCreate, VillaUpdate, VillaFilters


class CRUDVilla(CRUDBase[Villa, VillaCreate, VillaUpdate]):
    def get_by_slug(self, db: Session, *, slug: str) -> Optional[Villa]:
        return db.query(self.model).filter(self.model.slug == slug).first()

    def get_for_update(self, db: Session, id: int) -> Optional[Villa]:
        """Load the villa row with a write lock, serialising bookings per villa."""
        return db.query(self.model).filter(self.model.id == id).with_for_update().first()

    def get_active(self, db: Session) -> List[Villa]:
        return (
            db.query(self.model)
            .filter(self.model.status == VillaStatus.ACTIVE)
            .order_by(self.model.title)
            .all()
        )

    def filter_villas(self, db: Session, *, filters: VillaFilters, skip: int = 0, limit: int = 100) -> List[Villa]:
        query = db.query(self.model)
        if filters.region_id:
            query = query.filter(self.model.region_id == filters.region_id)
        if filters.sub_region_id:
            query = query.filter(self.model.sub_region_id == filters.sub_region_id)
        if filters.status:
            query = query.filter(self.model.status == filters.status)
        if filters.is_promoted is not None:
            query = query.filter(self.model.is_promoted == filters.is_promoted)
        if filters.min_guests:
            query = query.filter(self.model.max_guests >= filters.min_guests)
        if filters.min_bedrooms:
            query = query.filter(self.model.bedrooms >= filters.min_bedrooms)
        if filters.tag_id:
            query = query.filter(self.model.tags.any(Tag.id == filters.tag_id))
        return query.order_by(self.model.created_at.desc(), self.model.id.desc()).offset(skip).limit(limit).all()

    def create_with_tags(self, db: Session, *, obj_in: VillaCreate) -> Villa:
        obj_data = obj_in.dict(exclude={"tag_ids"})
        db_obj = self.model(**obj_data)
        if obj_in.tag_ids:
            db_obj.tags = self._load_tags(db, obj_in.tag_ids)
        db.add(db_obj)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise DuplicateError(f"Villa slug '{obj_in.slug}' is already in use")
        db.refresh(db_obj)
        return db_obj

    def update(self, db: Session, *, db_obj: Villa, obj_in: VillaUpdate) -> Villa:
        try:
            return super().update(db, db_obj=db_obj, obj_in=obj_in)
        except IntegrityError:
            db.rollback()
            raise DuplicateError("Villa slug is already in use")

    def set_tags(self, db: Session, *, db_obj: Villa, tag_ids: List[int]) -> Villa:
        db_obj.tags = self._load_tags(db, tag_ids)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def set_amenities(self, db: Session, *, db_obj: Villa, names: List[str]) -> List[VillaAmenity]:
        """Replace the amenity set; rows whose name survives are kept as they are."""
        existing = {a.name: a for a in db_obj.amenities}
        db_obj.amenities = [existing.get(name) or VillaAmenity(name=name) for name in names]
        db.commit()
        db.refresh(db_obj)
        return db_obj.amenities

    def remove(self, db: Session, *, id: int) -> Optional[Villa]:
        db_obj = self.get(db, id)
        if not db_obj:
            return None
        # Reservations are the booking record of truth, never cascade them away
        if db.query(Reservation.id).filter(Reservation.villa_id == id).first():
            raise ConflictError(f"Villa {id} has reservations; set it INACTIVE instead")
        db.delete(db_obj)
        db.commit()
        return db_obj

    def _load_tags(self, db: Session, tag_ids: List[int]) -> List[Tag]:
        unique_ids = list(dict.fromkeys(tag_ids))
        tags = db.query(Tag).filter(Tag.id.in_(unique_ids)).all() if unique_ids else []
        found = {t.id for t in tags}
        missing = [tid for tid in unique_ids if tid not in found]
        if missing:
            raise NotFoundError("Tag", missing[0])
        return tags


villa = CRUDVilla(Villa)
