from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from villa_admin.db.database import get_db
from villa_admin import crud
from villa_admin.schemas.villa_seo import VillaSEO, VillaSEOCreate, VillaSEOUpdate

router = APIRouter()


@router.get("/", response_model=List[VillaSEO])
def get_villa_seo_list(
    search_term: Optional[str] = Query(None, description="Matches villa title, villa slug or meta title"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db)
):
    """List SEO metadata of all villas"""
    return crud.villa_seo.search(db, search_term=search_term, skip=skip, limit=limit)


@router.post("/", response_model=VillaSEO, status_code=201)
def create_villa_seo(seo_in: VillaSEOCreate, db: Session = Depends(get_db)):
    if not crud.villa.get(db, seo_in.villa_id):
        raise HTTPException(status_code=404, detail="Villa not found")
    return crud.villa_seo.create(db, obj_in=seo_in)


@router.get("/villa/{villa_id}", response_model=VillaSEO)
def get_villa_seo(villa_id: int, db: Session = Depends(get_db)):
    """SEO metadata of a villa"""
    seo = crud.villa_seo.get_by_villa(db, villa_id=villa_id)
    if not seo:
        raise HTTPException(status_code=404, detail="Villa SEO not found")
    return seo


@router.put("/{seo_id}", response_model=VillaSEO)
def update_villa_seo(seo_id: int, seo_in: VillaSEOUpdate, db: Session = Depends(get_db)):
    seo = crud.villa_seo.get(db, seo_id)
    if not seo:
        raise HTTPException(status_code=404, detail="Villa SEO not found")
    return crud.villa_seo.update(db, db_obj=seo, obj_in=seo_in)


@router.delete("/{seo_id}")
def delete_villa_seo(seo_id: int, db: Session = Depends(get_db)):
    seo = crud.villa_seo.remove(db, id=seo_id)
    if not seo:
        raise HTTPException(status_code=404, detail="Villa SEO not found")
    return {"message": "Villa SEO deleted successfully"}
