from pydantic import BaseModel, Field, validator
from typing import Optional, List
from datetime import date, datetime
from decimal import Decimal
from enum import Enum


class PriceSource(str, Enum):
    SPECIAL_OFFER = "special_offer"
    SEASONAL = "seasonal"
    NONE = "none"


# Seasonal price schemas
class SeasonalPriceBase(BaseModel):
    season_name: str = Field(..., min_length=1, max_length=100)
    start_date: date
    end_date: date
    nightly_price: Decimal = Field(..., ge=0)
    weekly_price: Optional[Decimal] = Field(None, ge=0)
    description: Optional[str] = None
    is_active: bool = True

    @validator('end_date')
    def end_not_before_start(cls, v, values):
        if 'start_date' in values and v < values['start_date']:
            raise ValueError('end_date must not be before start_date')
        return v

    @validator('weekly_price', always=True)
    def default_weekly_price(cls, v, values):
        if v is None and values.get('nightly_price') is not None:
            return values['nightly_price'] * 7
        return v


class SeasonalPriceCreate(SeasonalPriceBase):
    villa_id: int


class SeasonalPriceUpdate(BaseModel):
    season_name: Optional[str] = Field(None, min_length=1, max_length=100)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    nightly_price: Optional[Decimal] = Field(None, ge=0)
    weekly_price: Optional[Decimal] = Field(None, ge=0)
    description: Optional[str] = None
    is_active: Optional[bool] = None


class SeasonalPrice(SeasonalPriceBase):
    id: int
    villa_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# Rate resolution
class NightPrice(BaseModel):
    date: date
    price: Optional[Decimal] = None
    source: PriceSource = PriceSource.NONE


class PriceResponse(BaseModel):
    villa_id: int
    date: date
    price: Optional[Decimal] = None
    source: PriceSource
    available: bool


class Quote(BaseModel):
    villa_id: int
    start_date: date
    end_date: date
    nights: int
    currency: str
    breakdown: List[NightPrice] = []
    missing_dates: List[date] = []
    total: Optional[Decimal] = None
    complete: bool = True
