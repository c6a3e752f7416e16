from pydantic import BaseModel, Field, EmailStr
from typing import Optional, Dict
from datetime import datetime, date

from villa_admin.models.customer import CustomerStatus


class CustomerBase(BaseModel):
    fullname: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=50)
    identity_number: Optional[str] = Field(None, max_length=50)
    interested_villa_id: Optional[int] = None
    note: Optional[str] = None
    status: CustomerStatus = CustomerStatus.NEW


class CustomerCreate(CustomerBase):
    pass


class CustomerUpdate(BaseModel):
    fullname: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    identity_number: Optional[str] = Field(None, max_length=50)
    interested_villa_id: Optional[int] = None
    note: Optional[str] = None
    status: Optional[CustomerStatus] = None


class Customer(CustomerBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CustomerFilters(BaseModel):
    status: Optional[CustomerStatus] = None
    villa_id: Optional[int] = None
    search_term: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None


class CustomerStats(BaseModel):
    total: int = 0
    by_status: Dict[str, int] = {}
    new_this_month: int = 0
    conversion_rate: float = 0.0  # percent of customers that booked
