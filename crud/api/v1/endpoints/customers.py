from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List, Optional
from auth import AuthContext, get_auth_context, require_admin
from database import get_db
from schemas.customer import Customer, CustomerCreate, CustomerUpdate
from schemas.rental import Rental
from crud import customer, rental

router = APIRouter()

@router.post("/", response_model=Customer, status_code=201)
def create_customer(customer_in: CustomerCreate, db: Session = Depends(get_db), _: AuthContext = Depends(require_admin)):
    return customer.create_customer(db, customer_in)

@router.get("/", response_model=List[Customer])
def list_customers(search: Optional[str] = None, db: Session = Depends(get_db), _: AuthContext = Depends(get_auth_context)):
    return customer.get_customers(db, search)

@router.get("/{customer_id}", response_model=Customer)
def get_customer(customer_id: int, db: Session = Depends(get_db), _: AuthContext = Depends(get_auth_context)):
    db_customer = customer.get_customer(db, customer_id)
    if db_customer is None:
        raise HTTPException(status_code=404, detail="Customer not found")
    return db_customer

@router.get("/{customer_id}/rentals", response_model=List[Rental])
def list_customer_rentals(customer_id: int, db: Session = Depends(get_db), _: AuthContext = Depends(get_auth_context)):
    records = customer.get_customer_rentals(db, customer_id)
    return rental.describe_rentals(db, records=records)

@router.put("/{customer_id}", response_model=Customer)
def update_customer(customer_id: int, customer_update: CustomerUpdate, db: Session = Depends(get_db), _: AuthContext = Depends(require_admin)):
    return customer.update_customer(db, customer_id, customer_update)

@router.delete("/{customer_id}")
def delete_customer(customer_id: int, db: Session = Depends(get_db), _: AuthContext = Depends(require_admin)):
    customer.delete_customer(db, customer_id)
    return {"status": "success"}
