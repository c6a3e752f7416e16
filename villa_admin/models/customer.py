from sqlalchemy import Column, Integer, String, Text, ForeignKey, Enum
from sqlalchemy.orm import relationship
from villa_admin.models.base import BaseModel
import enum


class CustomerStatus(enum.Enum):
    NEW = "NEW"
    CONTACTED = "CONTACTED"
    INTERESTED = "INTERESTED"
    BOOKED = "BOOKED"
    CLOSED = "CLOSED"
    LOST = "LOST"


class Customer(BaseModel):
    __tablename__ = "customers"

    fullname = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    phone = Column(String(50), nullable=True)
    identity_number = Column(String(50), nullable=True)
    interested_villa_id = Column(Integer, ForeignKey("villas.id", ondelete="SET NULL"), nullable=True)
    note = Column(Text, nullable=True)
    status = Column(
        Enum(CustomerStatus, values_callable=lambda obj: [e.value for e in obj]),
        default=CustomerStatus.NEW,
        nullable=False,
    )

    interested_villa = relationship("Villa")
