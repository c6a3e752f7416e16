from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List

from villa_admin.db.database import get_db
from villa_admin import crud
from villa_admin.schemas.villa import Tag, TagCreate, TagUpdate

router = APIRouter()


@router.get("/", response_model=List[Tag])
def get_tags(db: Session = Depends(get_db)):
    return crud.tag.get_all(db)


@router.post("/", response_model=Tag, status_code=201)
def create_tag(tag_in: TagCreate, db: Session = Depends(get_db)):
    return crud.tag.create(db, obj_in=tag_in)


@router.put("/{tag_id}", response_model=Tag)
def update_tag(tag_id: int, tag_in: TagUpdate, db: Session = Depends(get_db)):
    tag = crud.tag.get(db, tag_id)
    if not tag:
        raise HTTPException(status_code=404, detail="Tag not found")
    return crud.tag.update(db, db_obj=tag, obj_in=tag_in)


@router.delete("/{tag_id}")
def delete_tag(tag_id: int, db: Session = Depends(get_db)):
    tag = crud.tag.remove(db, id=tag_id)
    if not tag:
        raise HTTPException(status_code=404, detail="Tag not found")
    return {"message": "Tag deleted successfully"}
