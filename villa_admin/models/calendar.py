from sqlalchemy import Column, Integer, String, Date, ForeignKey, Numeric, Enum, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from villa_admin.models.base import BaseModel
import enum


class CalendarStatus(enum.Enum):
    AVAILABLE = "AVAILABLE"
    PENDING = "PENDING"  # reserved member, not driven by any flow yet
    RESERVED = "RESERVED"
    BLOCKED = "BLOCKED"


class EventType(enum.Enum):
    CHECKIN = "CHECKIN"
    CHECKOUT = "CHECKOUT"
    SPECIAL_OFFER = "SPECIAL_OFFER"


class CalendarDay(BaseModel):
    __tablename__ = "calendar_days"
    __table_args__ = (
        UniqueConstraint("villa_id", "date", name="uq_calendar_days_villa_date"),
        Index("idx_calendar_days_villa_status", "villa_id", "status"),
    )

    villa_id = Column(Integer, ForeignKey("villas.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    status = Column(
        Enum(CalendarStatus, values_callable=lambda obj: [e.value for e in obj]),
        default=CalendarStatus.AVAILABLE,
        nullable=False,
    )
    # Nightly override, only honoured on SPECIAL_OFFER days
    price = Column(Numeric(12, 2), nullable=True)
    event_type = Column(Enum(EventType, values_callable=lambda obj: [e.value for e in obj]), nullable=True)
    note = Column(String(500), nullable=True)

    villa = relationship("Villa", back_populates="calendar_days")
