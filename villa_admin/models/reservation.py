from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey, Numeric, Enum, Index
from sqlalchemy.orm import relationship
from villa_admin.models.base import BaseModel
import enum


class PaymentType(enum.Enum):
    FULL_PAYMENT = "FULL_PAYMENT"
    SPLIT_PAYMENT = "SPLIT_PAYMENT"


class ReservationStatus(enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class Reservation(BaseModel):
    __tablename__ = "reservations"
    __table_args__ = (
        Index("idx_reservations_villa_dates", "villa_id", "start_date", "end_date"),
    )

    booking_ref = Column(String(100), unique=True, nullable=False, index=True)
    villa_id = Column(Integer, ForeignKey("villas.id", ondelete="RESTRICT"), nullable=False, index=True)

    # Stay is the nights in [start_date, end_date), end_date is the checkout day
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    guest_count = Column(Integer, nullable=False)

    # Payment
    total_amount = Column(Numeric(12, 2), nullable=False)
    advance_amount = Column(Numeric(12, 2), nullable=False, default=0)
    remaining_amount = Column(Numeric(12, 2), nullable=False, default=0)
    payment_type = Column(
        Enum(PaymentType, values_callable=lambda obj: [e.value for e in obj]),
        default=PaymentType.SPLIT_PAYMENT,
        nullable=False,
    )
    payment_method = Column(String(50), nullable=False, default="BANK_TRANSFER")

    status = Column(
        Enum(ReservationStatus, values_callable=lambda obj: [e.value for e in obj]),
        default=ReservationStatus.PENDING,
        nullable=False,
        index=True,
    )

    # Customer contact
    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=False)
    customer_phone = Column(String(50), nullable=False)
    customer_notes = Column(Text, nullable=True)

    # Cancellation
    cancellation_reason = Column(Text, nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    villa = relationship("Villa", back_populates="reservations")

    @property
    def nights(self) -> int:
        return (self.end_date - self.start_date).days
