from pydantic import BaseModel, Field, validator
from typing import Optional, List
from datetime import datetime


class RegionBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    slug: Optional[str] = Field(None, max_length=200)
    is_main_region: bool = True
    parent_id: Optional[int] = None
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, max_length=500)
    is_promoted: bool = False
    is_active: bool = True
    meta_title: Optional[str] = Field(None, max_length=255)
    meta_desc: Optional[str] = None


class RegionCreate(RegionBase):
    @validator('parent_id', always=True)
    def parent_matches_level(cls, v, values):
        if values.get('is_main_region') and v is not None:
            raise ValueError('a main region cannot have a parent')
        if not values.get('is_main_region') and v is None:
            raise ValueError('a sub-region needs a parent main region')
        return v


class RegionUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    slug: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, max_length=500)
    is_promoted: Optional[bool] = None
    is_active: Optional[bool] = None
    meta_title: Optional[str] = Field(None, max_length=255)
    meta_desc: Optional[str] = None


class Region(RegionBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RegionTree(Region):
    children: List[Region] = []
