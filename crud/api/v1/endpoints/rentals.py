from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List, Optional
from auth import AuthContext, get_auth_context, require_admin
from database import get_db
from models.rental import RentalStatus
from schemas.rental import Rental, RentalCreate, RentalReturn, RentalUpdate
from crud import rental

router = APIRouter()

@router.post("/", response_model=Rental, status_code=201)
def create_rental(rental_in: RentalCreate, db: Session = Depends(get_db), _: AuthContext = Depends(require_admin)):
    db_rental = rental.create_rental(db, rental_in)
    return rental.describe_rental(db, db_rental)

@router.get("/", response_model=List[Rental])
def list_rentals(
    status: Optional[RentalStatus] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    _: AuthContext = Depends(get_auth_context),
):
    return rental.describe_rentals(db, status=status, search=search)

@router.get("/{rental_id}", response_model=Rental)
def get_rental(rental_id: int, db: Session = Depends(get_db), _: AuthContext = Depends(get_auth_context)):
    db_rental = rental.get_rental(db, rental_id)
    if db_rental is None:
        raise HTTPException(status_code=404, detail="Rental not found")
    return rental.describe_rental(db, db_rental)

@router.put("/{rental_id}", response_model=Rental)
def update_rental(rental_id: int, rental_update: RentalUpdate, db: Session = Depends(get_db), _: AuthContext = Depends(require_admin)):
    db_rental = rental.update_rental(db, rental_id, rental_update)
    return rental.describe_rental(db, db_rental)

@router.post("/{rental_id}/return", response_model=Rental)
def return_rental(rental_id: int, payload: RentalReturn, db: Session = Depends(get_db), _: AuthContext = Depends(require_admin)):
    db_rental = rental.return_rental(db, rental_id, payload.surcharge, payload.return_date)
    return rental.describe_rental(db, db_rental)

@router.delete("/{rental_id}")
def delete_rental(rental_id: int, db: Session = Depends(get_db), _: AuthContext = Depends(require_admin)):
    rental.delete_rental(db, rental_id)
    return {"status": "success"}
