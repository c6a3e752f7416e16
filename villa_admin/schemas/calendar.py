from pydantic import BaseModel, Field, validator
from typing import Optional, List
from datetime import date, datetime
from decimal import Decimal

from villa_admin.models.calendar import CalendarStatus, EventType


class CalendarDay(BaseModel):
    id: int
    villa_id: int
    date: date
    status: CalendarStatus
    price: Optional[Decimal] = None
    event_type: Optional[EventType] = None
    note: Optional[str] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CalendarRange(BaseModel):
    """Closed interval [start_date, end_date] used by the bulk calendar tools"""
    start_date: date
    end_date: date
    note: Optional[str] = Field(None, max_length=500)

    @validator('end_date')
    def end_not_before_start(cls, v, values):
        if 'start_date' in values and v < values['start_date']:
            raise ValueError('end_date must not be before start_date')
        return v


class SpecialOfferRange(CalendarRange):
    price: Optional[Decimal] = Field(None, ge=0, description="Override nightly price")


class CalendarUpdateResult(BaseModel):
    villa_id: int
    start_date: date
    end_date: date
    updated_rows: int


class AvailabilityResponse(BaseModel):
    villa_id: int
    start_date: date
    end_date: date
    available: bool
    conflicting_booking_refs: List[str] = []


class CalendarPopulateResult(BaseModel):
    villa_id: int
    created_rows: int


class ReconcileReport(BaseModel):
    villa_id: int
    start_date: date
    end_date: date
    checked_rows: int = 0
    fixed_rows: int = 0
    created_rows: int = 0
