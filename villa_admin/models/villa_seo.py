from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from villa_admin.models.base import BaseModel


class VillaSEO(BaseModel):
    __tablename__ = "villa_seo"

    villa_id = Column(Integer, ForeignKey("villas.id", ondelete="CASCADE"), unique=True, nullable=False)
    meta_title = Column(String(255), nullable=True)
    meta_description = Column(Text, nullable=True)
    meta_keywords = Column(Text, nullable=True)
    og_title = Column(String(255), nullable=True)
    og_description = Column(Text, nullable=True)
    og_image = Column(String(500), nullable=True)
    no_index = Column(Boolean, default=False, nullable=False)

    villa = relationship("Villa", back_populates="seo")

    @property
    def villa_title(self):
        return self.villa.title if self.villa else None

    @property
    def villa_slug(self):
        return self.villa.slug if self.villa else None
