from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class VillaSEOBase(BaseModel):
    meta_title: Optional[str] = Field(None, max_length=255)
    meta_description: Optional[str] = None
    meta_keywords: Optional[str] = None
    og_title: Optional[str] = Field(None, max_length=255)
    og_description: Optional[str] = None
    og_image: Optional[str] = Field(None, max_length=500)
    no_index: bool = False


class VillaSEOCreate(VillaSEOBase):
    villa_id: int


class VillaSEOUpdate(BaseModel):
    meta_title: Optional[str] = Field(None, max_length=255)
    meta_description: Optional[str] = None
    meta_keywords: Optional[str] = None
    og_title: Optional[str] = Field(None, max_length=255)
    og_description: Optional[str] = None
    og_image: Optional[str] = Field(None, max_length=500)
    no_index: Optional[bool] = None


class VillaSEO(VillaSEOBase):
    id: int
    villa_id: int
    villa_title: Optional[str] = None
    villa_slug: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
