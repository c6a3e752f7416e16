from typing import List
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from villa_admin.crud.base import CRUDBase
from villa_admin.core.exceptions import DuplicateError
from villa_admin.models.villa import Tag
from villa_admin.schemas.villa import TagCreate, TagUpdate


class CRUDTag(CRUDBase[Tag, TagCreate, TagUpdate]):
    def get_by_ids(self, db: Session, *, ids: List[int]) -> List[Tag]:
        if not ids:
            return []
        return db.query(self.model).filter(self.model.id.in_(ids)).all()

    def get_all(self, db: Session) -> List[Tag]:
        return db.query(self.model).order_by(self.model.name).all()

    def create(self, db: Session, *, obj_in: TagCreate) -> Tag:
        try:
            return super().create(db, obj_in=obj_in)
        except IntegrityError:
            db.rollback()
            raise DuplicateError(f"Tag '{obj_in.name}' already exists")

    def update(self, db: Session, *, db_obj: Tag, obj_in: TagUpdate) -> Tag:
        try:
            return super().update(db, db_obj=db_obj, obj_in=obj_in)
        except IntegrityError:
            db.rollback()
            raise DuplicateError("Tag name or slug already exists")


tag = CRUDTag(Tag)
