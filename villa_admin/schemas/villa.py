from pydantic import BaseModel, Field, validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal

from villa_admin.models.villa import VillaStatus


# Tag schemas
class TagBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    icon: Optional[str] = Field(None, max_length=100)


class TagCreate(TagBase):
    pass


class TagUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    slug: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    icon: Optional[str] = Field(None, max_length=100)


class Tag(TagBase):
    id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class VillaTagsUpdate(BaseModel):
    tag_ids: List[int] = []


# Amenity schemas
class VillaAmenity(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class VillaAmenitiesUpdate(BaseModel):
    names: List[str] = []

    @validator("names")
    def clean_names(cls, v):
        cleaned = []
        for name in v:
            name = name.strip()
            if not name:
                raise ValueError("Amenity names must not be empty")
            if len(name) > 150:
                raise ValueError("Amenity names are limited to 150 characters")
            if name not in cleaned:
                cleaned.append(name)
        return cleaned


# Villa schemas
class VillaBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=255, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    description: Optional[str] = None
    region_id: Optional[int] = None
    sub_region_id: Optional[int] = None
    bedrooms: int = Field(1, ge=0)
    bathrooms: int = Field(1, ge=0)
    max_guests: int = Field(2, ge=1)
    minimum_stay: int = Field(1, ge=1)
    check_in_time: str = Field("16:00", pattern=r"^\d{2}:\d{2}$")
    check_out_time: str = Field("10:00", pattern=r"^\d{2}:\d{2}$")
    deposit: Decimal = Field(Decimal("0"), ge=0)
    cleaning_fee: Optional[Decimal] = Field(None, ge=0)
    advance_payment_rate: int = Field(30, ge=0, le=100)
    short_stay_day_limit: Optional[int] = Field(None, ge=1)
    rules: List[str] = []
    embed_code: Optional[str] = None
    status: VillaStatus = VillaStatus.ACTIVE
    is_promoted: bool = False
    check_in_notes: Optional[str] = None
    check_out_notes: Optional[str] = None
    cancellation_notes: Optional[str] = None


class VillaCreate(VillaBase):
    tag_ids: List[int] = []


class VillaUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = Field(None, min_length=1, max_length=255, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    description: Optional[str] = None
    region_id: Optional[int] = None
    sub_region_id: Optional[int] = None
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[int] = Field(None, ge=0)
    max_guests: Optional[int] = Field(None, ge=1)
    minimum_stay: Optional[int] = Field(None, ge=1)
    check_in_time: Optional[str] = Field(None, pattern=r"^\d{2}:\d{2}$")
    check_out_time: Optional[str] = Field(None, pattern=r"^\d{2}:\d{2}$")
    deposit: Optional[Decimal] = Field(None, ge=0)
    cleaning_fee: Optional[Decimal] = Field(None, ge=0)
    advance_payment_rate: Optional[int] = Field(None, ge=0, le=100)
    short_stay_day_limit: Optional[int] = Field(None, ge=1)
    rules: Optional[List[str]] = None
    embed_code: Optional[str] = None
    status: Optional[VillaStatus] = None
    is_promoted: Optional[bool] = None
    check_in_notes: Optional[str] = None
    check_out_notes: Optional[str] = None
    cancellation_notes: Optional[str] = None


class Villa(VillaBase):
    id: int
    tags: List[Tag] = []
    amenities: List[VillaAmenity] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class VillaFilters(BaseModel):
    region_id: Optional[int] = None
    sub_region_id: Optional[int] = None
    status: Optional[VillaStatus] = None
    is_promoted: Optional[bool] = None
    min_guests: Optional[int] = None
    min_bedrooms: Optional[int] = None
    tag_id: Optional[int] = None
