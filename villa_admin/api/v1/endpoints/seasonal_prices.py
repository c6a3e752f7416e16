from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List

from villa_admin.db.database import get_db
from villa_admin import crud
from villa_admin.schemas.pricing import SeasonalPrice, SeasonalPriceCreate, SeasonalPriceUpdate

router = APIRouter()


@router.get("/", response_model=List[SeasonalPrice])
def get_seasonal_prices(
    villa_id: int = Query(...),
    active_only: bool = Query(False),
    db: Session = Depends(get_db)
):
    """Seasonal price rules of a villa ordered by start date"""
    return crud.seasonal_price.get_by_villa(db, villa_id=villa_id, active_only=active_only)


@router.post("/", response_model=SeasonalPrice, status_code=201)
def create_seasonal_price(price_in: SeasonalPriceCreate, db: Session = Depends(get_db)):
    return crud.seasonal_price.create(db, obj_in=price_in)


@router.get("/{price_id}", response_model=SeasonalPrice)
def get_seasonal_price(price_id: int, db: Session = Depends(get_db)):
    price = crud.seasonal_price.get(db, price_id)
    if not price:
        raise HTTPException(status_code=404, detail="Seasonal price not found")
    return price


@router.put("/{price_id}", response_model=SeasonalPrice)
def update_seasonal_price(price_id: int, price_in: SeasonalPriceUpdate, db: Session = Depends(get_db)):
    price = crud.seasonal_price.get(db, price_id)
    if not price:
        raise HTTPException(status_code=404, detail="Seasonal price not found")
    return crud.seasonal_price.update(db, db_obj=price, obj_in=price_in)


@router.delete("/{price_id}")
def delete_seasonal_price(price_id: int, db: Session = Depends(get_db)):
    price = crud.seasonal_price.remove(db, id=price_id)
    if not price:
        raise HTTPException(status_code=404, detail="Seasonal price not found")
    return {"message": "Seasonal price deleted successfully"}
