from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey, Numeric, JSON, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from villa_admin.models.base import BaseModel
import enum


class VillaStatus(enum.Enum):
    ACTIVE = "ACTIVE"      # open for rental
    INACTIVE = "INACTIVE"  # temporarily closed


class Villa(BaseModel):
    __tablename__ = "villas"

    title = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)

    region_id = Column(Integer, ForeignKey("regions.id", ondelete="SET NULL"), nullable=True, index=True)
    sub_region_id = Column(Integer, ForeignKey("regions.id", ondelete="SET NULL"), nullable=True, index=True)

    # Capacity
    bedrooms = Column(Integer, default=1, nullable=False)
    bathrooms = Column(Integer, default=1, nullable=False)
    max_guests = Column(Integer, default=2, nullable=False)
    minimum_stay = Column(Integer, default=1, nullable=False)  # nights

    check_in_time = Column(String(10), default="16:00")  # e.g. "16:00"
    check_out_time = Column(String(10), default="10:00")

    # Money
    deposit = Column(Numeric(12, 2), default=0, nullable=False)
    cleaning_fee = Column(Numeric(12, 2), nullable=True)
    advance_payment_rate = Column(Integer, default=30, nullable=False)  # percent
    short_stay_day_limit = Column(Integer, nullable=True)

    rules = Column(JSON, default=list)  # list of strings
    embed_code = Column(Text, nullable=True)
    status = Column(Enum(VillaStatus, values_callable=lambda obj: [e.value for e in obj]), default=VillaStatus.ACTIVE, nullable=False)
    is_promoted = Column(Boolean, default=False)

    check_in_notes = Column(Text, nullable=True)
    check_out_notes = Column(Text, nullable=True)
    cancellation_notes = Column(Text, nullable=True)

    # Relationships
    region = relationship("Region", foreign_keys=[region_id])
    sub_region = relationship("Region", foreign_keys=[sub_region_id])
    tags = relationship("Tag", secondary="villa_tags", back_populates="villas")
    calendar_days = relationship("CalendarDay", back_populates="villa", cascade="all, delete-orphan", lazy="dynamic")
    seasonal_prices = relationship("SeasonalPrice", back_populates="villa", cascade="all, delete-orphan")
    reservations = relationship("Reservation", back_populates="villa")
    seo = relationship("VillaSEO", back_populates="villa", uselist=False, cascade="all, delete-orphan")
    amenities = relationship(
        "VillaAmenity", back_populates="villa", cascade="all, delete-orphan", order_by="VillaAmenity.name"
    )


class Tag(BaseModel):
    __tablename__ = "tags"

    name = Column(String(100), unique=True, nullable=False)
    slug = Column(String(100), unique=True, nullable=True)
    description = Column(Text, nullable=True)
    icon = Column(String(100), nullable=True)

    villas = relationship("Villa", secondary="villa_tags", back_populates="tags")


class VillaTag(BaseModel):
    __tablename__ = "villa_tags"
    __table_args__ = (
        UniqueConstraint("villa_id", "tag_id", name="uq_villa_tags_villa_tag"),
    )

    villa_id = Column(Integer, ForeignKey("villas.id", ondelete="CASCADE"), nullable=False, index=True)
    tag_id = Column(Integer, ForeignKey("tags.id", ondelete="CASCADE"), nullable=False, index=True)


class VillaAmenity(BaseModel):
    __tablename__ = "villa_amenities"
    __table_args__ = (
        UniqueConstraint("villa_id", "name", name="uq_villa_amenities_villa_name"),
    )

    villa_id = Column(Integer, ForeignKey("villas.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(150), nullable=False)  # e.g. "Wi-Fi", "Jacuzzi"

    villa = relationship("Villa", back_populates="amenities")
