from sqlalchemy.orm import Session
from models.account import Customer
from schemas.account import CustomerCreate, CustomerUpdate
from core.exceptions import ResourceNotFoundError, ValidationError
from core.messages import get_message
from services.auth import get_customer_by_phone, get_password_hash
from typing import List
import logging

logger = logging.getLogger(__name__)

def _get_by_phone(db: Session, phone: str) -> Customer:
    customer = get_customer_by_phone(db, phone)
    if not customer:
        raise ResourceNotFoundError(get_message("customer.not_found"), "Customer", phone)
    return customer

def _commit(db: Session, customer: Customer) -> Customer:
    try:
        db.commit()
        db.refresh(customer)
    except Exception:
        db.rollback()
        raise
    return customer

def list_customers(db: Session) -> List[Customer]:
    """Approved customers, blocked or not"""
    return db.query(Customer).filter(Customer.is_approved.is_(True)).order_by(Customer.created_at).all()

def list_pending_customers(db: Session) -> List[Customer]:
    return db.query(Customer).filter(Customer.is_approved.is_(False)).order_by(Customer.created_at).all()

def create_customer(db: Session, data: CustomerCreate, approved: bool = True) -> Customer:
    """Create a customer; self-registered customers wait for approval"""
    if get_customer_by_phone(db, data.phone):
        logger.warning(f"Customer phone already exists: {data.phone}")
        raise ValidationError(get_message("customer.phone_taken"), field="phone")

    customer = Customer(
        name=data.name,
        phone=data.phone,
        password_hash=get_password_hash(data.password),
        is_approved=approved
    )
    db.add(customer)
    _commit(db, customer)

    logger.info(f"Customer created: {customer.phone} (approved={approved})")
    return customer

def approve_customer(db: Session, phone: str) -> Customer:
    customer = _get_by_phone(db, phone)
    customer.is_approved = True
    _commit(db, customer)
    logger.info(f"Customer approved: {phone}")
    return customer

def reject_customer(db: Session, phone: str) -> None:
    """Discard a pending registration"""
    customer = _get_by_phone(db, phone)
    if customer.is_approved:
        raise ResourceNotFoundError(get_message("customer.not_found"), "Customer", phone)
    delete_customer(db, phone)

def update_customer(db: Session, data: CustomerUpdate) -> Customer:
    customer = _get_by_phone(db, data.phone)

    if data.name and data.name.strip():
        customer.name = data.name.strip()
    if data.new_phone and data.new_phone != customer.phone:
        if get_customer_by_phone(db, data.new_phone):
            raise ValidationError(get_message("customer.phone_taken"), field="new_phone")
        customer.phone = data.new_phone
    if data.password:
        customer.password_hash = get_password_hash(data.password)

    _commit(db, customer)
    logger.info(f"Customer updated: {customer.phone}")
    return customer

def delete_customer(db: Session, phone: str) -> None:
    customer = _get_by_phone(db, phone)
    try:
        db.delete(customer)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(f"Customer deleted: {phone}")

def block_customer(db: Session, phone: str, reason: str) -> Customer:
    if not reason or not reason.strip():
        raise ValidationError(get_message("customer.block_reason_required"), field="reason")

    customer = _get_by_phone(db, phone)
    customer.is_blocked = True
    customer.block_reason = reason.strip()
    _commit(db, customer)
    logger.info(f"Customer blocked: {phone} ({customer.block_reason})")
    return customer

def unblock_customer(db: Session, phone: str) -> Customer:
    customer = _get_by_phone(db, phone)
    customer.is_blocked = False
    customer.block_reason = ""
    _commit(db, customer)
    logger.info(f"Customer unblocked: {phone}")
    return customer
