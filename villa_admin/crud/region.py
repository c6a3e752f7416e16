from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from villa_admin.crud.base import CRUDBase
from villa_admin.core.exceptions import DuplicateError, NotFoundError, ValidationError
from villa_admin.models.region import Region
from villa_admin.schemas.region import RegionCreate, RegionUpdate


class CRUDRegion(CRUDBase[Region, RegionCreate, RegionUpdate]):
    def get_main_regions(self, db: Session, *, active_only: bool = False) -> List[Region]:
        query = db.query(self.model).filter(self.model.is_main_region == True)
        if active_only:
            query = query.filter(self.model.is_active == True)
        return query.order_by(self.model.name).all()

    def get_sub_regions(self, db: Session, *, parent_id: int) -> List[Region]:
        return db.query(self.model).filter(self.model.parent_id == parent_id).order_by(self.model.name).all()

    def get_by_slug(self, db: Session, *, slug: str) -> Optional[Region]:
        return db.query(self.model).filter(self.model.slug == slug).first()

    def create(self, db: Session, *, obj_in: RegionCreate) -> Region:
        if obj_in.parent_id is not None:
            parent = self.get(db, obj_in.parent_id)
            if not parent:
                raise NotFoundError("Region", obj_in.parent_id)
            if not parent.is_main_region:
                raise ValidationError("Sub-regions can only be attached to a main region")
        db_obj = self.model(**obj_in.dict())
        db.add(db_obj)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise DuplicateError(f"Region slug '{obj_in.slug}' is already in use")
        db.refresh(db_obj)
        return db_obj

    def update(self, db: Session, *, db_obj: Region, obj_in: RegionUpdate) -> Region:
        try:
            return super().update(db, db_obj=db_obj, obj_in=obj_in)
        except IntegrityError:
            db.rollback()
            raise DuplicateError("Region slug is already in use")


region = CRUDRegion(Region)
