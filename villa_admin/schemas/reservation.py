from pydantic import BaseModel, Field, EmailStr, validator
from typing import Optional, List
from datetime import date, datetime
from decimal import Decimal

from villa_admin.models.reservation import PaymentType, ReservationStatus


class ReservationBase(BaseModel):
    villa_id: int
    start_date: date
    end_date: date
    guest_count: int = Field(..., ge=1)
    payment_type: PaymentType = PaymentType.SPLIT_PAYMENT
    payment_method: str = Field("BANK_TRANSFER", max_length=50)
    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_email: EmailStr
    customer_phone: str = Field(..., min_length=3, max_length=50)
    customer_notes: Optional[str] = None

    @validator('end_date')
    def end_after_start(cls, v, values):
        if 'start_date' in values and v <= values['start_date']:
            raise ValueError('end_date (checkout) must be after start_date')
        return v


class ReservationCreate(ReservationBase):
    booking_ref: Optional[str] = Field(None, min_length=1, max_length=100)
    # Quoted from the calendar when omitted
    total_amount: Optional[Decimal] = Field(None, ge=0)
    advance_amount: Optional[Decimal] = Field(None, ge=0)
    remaining_amount: Optional[Decimal] = Field(None, ge=0)


class ReservationUpdate(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    guest_count: Optional[int] = Field(None, ge=1)
    total_amount: Optional[Decimal] = Field(None, ge=0)
    advance_amount: Optional[Decimal] = Field(None, ge=0)
    remaining_amount: Optional[Decimal] = Field(None, ge=0)
    payment_type: Optional[PaymentType] = None
    payment_method: Optional[str] = Field(None, max_length=50)
    customer_name: Optional[str] = Field(None, min_length=1, max_length=255)
    customer_email: Optional[EmailStr] = None
    customer_phone: Optional[str] = Field(None, min_length=3, max_length=50)
    customer_notes: Optional[str] = None


class ReservationStatusUpdate(BaseModel):
    status: ReservationStatus
    cancellation_reason: Optional[str] = None


class VillaSummary(BaseModel):
    id: int
    title: str
    slug: str
    max_guests: int
    minimum_stay: int
    check_in_time: Optional[str] = None
    check_out_time: Optional[str] = None

    class Config:
        from_attributes = True


class Reservation(ReservationBase):
    id: int
    booking_ref: str
    total_amount: Decimal
    advance_amount: Decimal
    remaining_amount: Decimal
    status: ReservationStatus
    nights: int
    cancellation_reason: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    villa: Optional[VillaSummary] = None

    class Config:
        from_attributes = True


class ReservationFilters(BaseModel):
    villa_id: Optional[int] = None
    status: Optional[ReservationStatus] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    customer_email: Optional[str] = None
    booking_ref: Optional[str] = None


class ReservationStats(BaseModel):
    total_reservations: int = 0
    pending_reservations: int = 0
    confirmed_reservations: int = 0
    completed_reservations: int = 0
    cancelled_reservations: int = 0
    total_revenue: Decimal = Decimal("0")
    average_booking_value: Decimal = Decimal("0")
