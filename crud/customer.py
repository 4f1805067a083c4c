import logging
from sqlalchemy import or_
from sqlalchemy.orm import Session
from typing import List, Optional
from exceptions import NotFoundError, ReferencedError
from models.customer import Customer
from models.rental import Rental
from schemas.customer import CustomerCreate, CustomerUpdate

logger = logging.getLogger(__name__)


def create_customer(db: Session, customer: CustomerCreate, commit: bool = True) -> Customer:
    db_customer = Customer(**customer.model_dump())
    db.add(db_customer)
    if commit:
        db.commit()
        db.refresh(db_customer)
    else:
        db.flush()
    return db_customer

def get_customer(db: Session, customer_id: int) -> Optional[Customer]:
    return db.query(Customer).filter(Customer.id == customer_id).first()

def get_customers(db: Session, search: Optional[str] = None) -> List[Customer]:
    query = db.query(Customer)

    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(
            Customer.name.ilike(pattern),
            Customer.phone.ilike(pattern),
            Customer.address.ilike(pattern),
        ))

    return query.order_by(Customer.name).all()

def get_customer_rentals(db: Session, customer_id: int) -> List[Rental]:
    if get_customer(db, customer_id) is None:
        raise NotFoundError("Customer not found")
    return db.query(Rental).filter(Rental.customer_id == customer_id).order_by(Rental.rental_date.desc()).all()

def update_customer(db: Session, customer_id: int, customer_update: CustomerUpdate) -> Customer:
    db_customer = get_customer(db, customer_id)
    if db_customer is None:
        raise NotFoundError("Customer not found")

    update_data = customer_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(db_customer, field, value)
    db.commit()
    db.refresh(db_customer)
    return db_customer

def delete_customer(db: Session, customer_id: int) -> None:
    db_customer = get_customer(db, customer_id)
    if db_customer is None:
        raise NotFoundError("Customer not found")

    rental_count = db.query(Rental).filter(Rental.customer_id == customer_id).count()
    if rental_count:
        logger.info("Refused to delete customer %s: %d rentals on record", customer_id, rental_count)
        raise ReferencedError("Cannot delete this customer because they have a rental history.")

    db.delete(db_customer)
    db.commit()
    logger.info("Deleted customer %s", customer_id)
