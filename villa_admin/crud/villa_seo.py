from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from villa_admin.crud.base import CRUDBase
from villa_admin.core.exceptions import DuplicateError
from villa_admin.models.villa import Villa
from villa_admin.models.villa_seo import VillaSEO
from villa_admin.schemas.villa_seo import VillaSEOCreate, VillaSEOUpdate


class CRUDVillaSEO(CRUDBase[VillaSEO, VillaSEOCreate, VillaSEOUpdate]):
    def get_by_villa(self, db: Session, *, villa_id: int) -> Optional[VillaSEO]:
        return db.query(self.model).filter(self.model.villa_id == villa_id).first()

    def search(self, db: Session, *, search_term: Optional[str] = None, skip: int = 0, limit: int = 100) -> List[VillaSEO]:
        """All SEO records, optionally matching villa title, villa slug or meta title"""
        query = db.query(self.model).join(Villa, Villa.id == self.model.villa_id)
        if search_term:
            term = f"%{search_term.strip()}%"
            query = query.filter(
                or_(Villa.title.ilike(term), Villa.slug.ilike(term), self.model.meta_title.ilike(term))
            )
        return query.order_by(Villa.title, self.model.id).offset(skip).limit(limit).all()

    def create(self, db: Session, *, obj_in: VillaSEOCreate) -> VillaSEO:
        if self.get_by_villa(db, villa_id=obj_in.villa_id):
            raise DuplicateError(f"Villa {obj_in.villa_id} already has SEO metadata")
        try:
            return super().create(db, obj_in=obj_in)
        except IntegrityError:
            db.rollback()
            raise DuplicateError(f"Villa {obj_in.villa_id} already has SEO metadata")


villa_seo = CRUDVillaSEO(VillaSEO)
