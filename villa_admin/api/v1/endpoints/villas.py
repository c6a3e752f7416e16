from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from villa_admin.db.database import get_db
from villa_admin import crud
from villa_admin.models.villa import VillaStatus
from villa_admin.schemas.villa import (
    Villa, VillaAmenity, VillaAmenitiesUpdate, VillaCreate, VillaUpdate, VillaFilters, VillaTagsUpdate
)
from villa_admin.services.calendar_maintenance import ensure_calendar_window

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=List[Villa])
def get_villas(
    region_id: Optional[int] = Query(None),
    sub_region_id: Optional[int] = Query(None),
    status: Optional[VillaStatus] = Query(None),
    is_promoted: Optional[bool] = Query(None),
    min_guests: Optional[int] = Query(None, ge=1),
    min_bedrooms: Optional[int] = Query(None, ge=0),
    tag_id: Optional[int] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db)
):
    """List villas with optional filters"""
    filters = VillaFilters(
        region_id=region_id,
        sub_region_id=sub_region_id,
        status=status,
        is_promoted=is_promoted,
        min_guests=min_guests,
        min_bedrooms=min_bedrooms,
        tag_id=tag_id,
    )
    return crud.villa.filter_villas(db, filters=filters, skip=skip, limit=limit)


@router.post("/", response_model=Villa, status_code=201)
def create_villa(villa_in: VillaCreate, db: Session = Depends(get_db)):
    """Create a villa and populate its calendar window"""
    villa = crud.villa.create_with_tags(db, obj_in=villa_in)
    created = ensure_calendar_window(db, villa.id)
    logger.info(f"Villa {villa.id} ({villa.slug}) created with {created} calendar days")
    db.refresh(villa)
    return villa


@router.get("/{villa_id}", response_model=Villa)
def get_villa(villa_id: int, db: Session = Depends(get_db)):
    villa = crud.villa.get(db, villa_id)
    if not villa:
        raise HTTPException(status_code=404, detail="Villa not found")
    return villa


@router.put("/{villa_id}", response_model=Villa)
def update_villa(villa_id: int, villa_in: VillaUpdate, db: Session = Depends(get_db)):
    """Update villa details"""
    villa = crud.villa.get(db, villa_id)
    if not villa:
        raise HTTPException(status_code=404, detail="Villa not found")
    return crud.villa.update(db, db_obj=villa, obj_in=villa_in)


@router.delete("/{villa_id}")
def delete_villa(villa_id: int, db: Session = Depends(get_db)):
    """Delete a villa that has no reservations"""
    villa = crud.villa.remove(db, id=villa_id)
    if not villa:
        raise HTTPException(status_code=404, detail="Villa not found")
    return {"message": "Villa deleted successfully"}


@router.put("/{villa_id}/tags", response_model=Villa)
def set_villa_tags(villa_id: int, tags_in: VillaTagsUpdate, db: Session = Depends(get_db)):
    """Replace the tag set of a villa"""
    villa = crud.villa.get(db, villa_id)
    if not villa:
        raise HTTPException(status_code=404, detail="Villa not found")
    return crud.villa.set_tags(db, db_obj=villa, tag_ids=tags_in.tag_ids)


@router.get("/{villa_id}/amenities", response_model=List[VillaAmenity])
def get_villa_amenities(villa_id: int, db: Session = Depends(get_db)):
    villa = crud.villa.get(db, villa_id)
    if not villa:
        raise HTTPException(status_code=404, detail="Villa not found")
    return villa.amenities


@router.put("/{villa_id}/amenities", response_model=List[VillaAmenity])
def set_villa_amenities(villa_id: int, amenities_in: VillaAmenitiesUpdate, db: Session = Depends(get_db)):
    """Replace the amenity set of a villa"""
    villa = crud.villa.get(db, villa_id)
    if not villa:
        raise HTTPException(status_code=404, detail="Villa not found")
    amenities = crud.villa.set_amenities(db, db_obj=villa, names=amenities_in.names)
    logger.info(f"Villa {villa_id} amenities set to {[a.name for a in amenities]}")
    return amenities
