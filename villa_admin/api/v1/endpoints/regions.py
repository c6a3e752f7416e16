from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List

from villa_admin.db.database import get_db
from villa_admin import crud
from villa_admin.schemas.region import Region, RegionCreate, RegionUpdate, RegionTree

router = APIRouter()


@router.get("/", response_model=List[Region])
def get_regions(skip: int = Query(0, ge=0), limit: int = Query(100, ge=1, le=500), db: Session = Depends(get_db)):
    return crud.region.get_multi(db, skip=skip, limit=limit)


@router.get("/tree", response_model=List[RegionTree])
def get_region_tree(active_only: bool = Query(False), db: Session = Depends(get_db)):
    """Main regions with their sub-regions"""
    tree = []
    for main in crud.region.get_main_regions(db, active_only=active_only):
        node = RegionTree.model_validate(main)
        node.children = [
            Region.model_validate(child)
            for child in crud.region.get_sub_regions(db, parent_id=main.id)
            if child.is_active or not active_only
        ]
        tree.append(node)
    return tree


@router.post("/", response_model=Region, status_code=201)
def create_region(region_in: RegionCreate, db: Session = Depends(get_db)):
    return crud.region.create(db, obj_in=region_in)


@router.get("/{region_id}", response_model=Region)
def get_region(region_id: int, db: Session = Depends(get_db)):
    region = crud.region.get(db, region_id)
    if not region:
        raise HTTPException(status_code=404, detail="Region not found")
    return region


@router.put("/{region_id}", response_model=Region)
def update_region(region_id: int, region_in: RegionUpdate, db: Session = Depends(get_db)):
    region = crud.region.get(db, region_id)
    if not region:
        raise HTTPException(status_code=404, detail="Region not found")
    return crud.region.update(db, db_obj=region, obj_in=region_in)


@router.delete("/{region_id}")
def delete_region(region_id: int, db: Session = Depends(get_db)):
    """Delete a region; its sub-regions go with it"""
    region = crud.region.remove(db, id=region_id)
    if not region:
        raise HTTPException(status_code=404, detail="Region not found")
    return {"message": "Region deleted successfully"}
