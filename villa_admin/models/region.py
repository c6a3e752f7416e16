from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from villa_admin.models.base import BaseModel


class Region(BaseModel):
    __tablename__ = "regions"

    name = Column(String(200), nullable=False)
    slug = Column(String(200), unique=True, nullable=True)
    is_main_region = Column(Boolean, default=True, nullable=False)
    # Sub-regions point at their main region
    parent_id = Column(Integer, ForeignKey("regions.id", ondelete="CASCADE"), nullable=True, index=True)
    description = Column(Text, nullable=True)
    image_url = Column(String(500), nullable=True)
    is_promoted = Column(Boolean, default=False)
    is_active = Column(Boolean, default=True)
    meta_title = Column(String(255), nullable=True)
    meta_desc = Column(Text, nullable=True)

    parent = relationship("Region", remote_side="Region.id", back_populates="children")
    children = relationship("Region", back_populates="parent", cascade="all, delete-orphan")
