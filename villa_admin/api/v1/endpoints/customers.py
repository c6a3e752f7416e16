from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
import csv
import io

from villa_admin.db.database import get_db
from villa_admin import crud
from villa_admin.models.customer import CustomerStatus
from villa_admin.schemas.customer import Customer, CustomerCreate, CustomerUpdate, CustomerFilters, CustomerStats

router = APIRouter()


@router.get("/", response_model=List[Customer])
def get_customers(
    status: Optional[CustomerStatus] = Query(None),
    villa_id: Optional[int] = Query(None),
    search_term: Optional[str] = Query(None, description="Matches name, email or phone"),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db)
):
    """List customer leads"""
    filters = CustomerFilters(
        status=status, villa_id=villa_id, search_term=search_term, date_from=date_from, date_to=date_to
    )
    return crud.customer.filter_customers(db, filters=filters, skip=skip, limit=limit)


@router.get("/stats", response_model=CustomerStats)
def get_customer_stats(db: Session = Depends(get_db)):
    return crud.customer.get_stats(db)


@router.get("/export")
def export_customers(
    status: Optional[CustomerStatus] = Query(None),
    villa_id: Optional[int] = Query(None),
    search_term: Optional[str] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    db: Session = Depends(get_db)
):
    """Export the filtered customer list as CSV"""
    filters = CustomerFilters(
        status=status, villa_id=villa_id, search_term=search_term, date_from=date_from, date_to=date_to
    )
    customers = crud.customer.filter_customers(db, filters=filters, limit=None)

    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow([
        "Full Name", "Email", "Phone", "Identity Number", "Interested Villa",
        "Status", "Note", "Created At"
    ])
    for customer in customers:
        writer.writerow([
            customer.fullname,
            customer.email,
            customer.phone or "",
            customer.identity_number or "",
            customer.interested_villa.title if customer.interested_villa else "",
            customer.status.value,
            customer.note or "",
            customer.created_at.date().isoformat() if customer.created_at else "",
        ])

    filename = f"customers_{date.today().isoformat()}.csv"
    return StreamingResponse(
        io.BytesIO(output.getvalue().encode("utf-8")),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )


@router.post("/", response_model=Customer, status_code=201)
def create_customer(customer_in: CustomerCreate, db: Session = Depends(get_db)):
    if customer_in.interested_villa_id and not crud.villa.get(db, customer_in.interested_villa_id):
        raise HTTPException(status_code=404, detail="Villa not found")
    return crud.customer.create(db, obj_in=customer_in)


@router.get("/{customer_id}", response_model=Customer)
def get_customer(customer_id: int, db: Session = Depends(get_db)):
    customer = crud.customer.get(db, customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer


@router.put("/{customer_id}", response_model=Customer)
def update_customer(customer_id: int, customer_in: CustomerUpdate, db: Session = Depends(get_db)):
    customer = crud.customer.get(db, customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return crud.customer.update(db, db_obj=customer, obj_in=customer_in)


@router.delete("/{customer_id}")
def delete_customer(customer_id: int, db: Session = Depends(get_db)):
    customer = crud.customer.remove(db, id=customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return {"message": "Customer deleted successfully"}
