from sqlalchemy.orm import Session
from models.account import Admin, Vendor
from models.product import Product
from core.exceptions import ResourceNotFoundError, ValidationError
from core.messages import get_message
from services.auth import get_password_hash
from services.media import remove_files
from typing import List, Optional
import logging
import re

logger = logging.getLogger(__name__)

PHONE_PATTERN = re.compile(r'^\d{11}$')

def _normalize_email(email: str) -> str:
    return email.lower().strip()

def _check_email_free(db: Session, email: str, exclude_id: Optional[str] = None) -> None:
    # Vendor and admin logins share the email namespace
    if db.query(Admin).filter(Admin.email == email).first():
        logger.warning(f"Vendor email collides with an admin account: {email}")
        raise ValidationError(get_message("vendor.email_taken"), field="email")
    query = db.query(Vendor).filter(Vendor.email == email)
    if exclude_id:
        query = query.filter(Vendor.id != exclude_id)
    if query.first():
        logger.warning(f"Vendor email already in use: {email}")
        raise ValidationError(get_message("vendor.email_taken"), field="email")

def _check_phone(db: Session, phone: str, exclude_id: Optional[str] = None) -> None:
    if not PHONE_PATTERN.match(phone):
        raise ValidationError(get_message("customer.invalid_phone"), field="phone")
    query = db.query(Vendor).filter(Vendor.phone == phone)
    if exclude_id:
        query = query.filter(Vendor.id != exclude_id)
    if query.first():
        logger.warning(f"Vendor phone already in use: {phone}")
        raise ValidationError(get_message("vendor.phone_taken"), field="phone")

def list_vendors(db: Session) -> List[Vendor]:
    return db.query(Vendor).order_by(Vendor.created_at).all()

def get_vendor(db: Session, vendor_id: str) -> Vendor:
    vendor = db.query(Vendor).filter(Vendor.id == vendor_id).first()
    if not vendor:
        raise ResourceNotFoundError(get_message("vendor.not_found"), "Vendor", vendor_id)
    return vendor

def create_vendor(
    db: Session,
    name: str,
    email: str,
    password: str,
    description: Optional[str] = None,
    phone: Optional[str] = None,
    logo: Optional[str] = None,
    require_phone: bool = False
) -> Vendor:
    """Create a vendor account with a hashed password and optional stored logo.

    Admin-created vendors must carry a phone number; self-registered ones need not.
    """
    if not name or not name.strip() or not email or not email.strip() or not password:
        raise ValidationError(get_message("vendor.required_fields"))
    if require_phone and (not phone or not phone.strip()):
        raise ValidationError(get_message("vendor.required_fields"))

    email = _normalize_email(email)
    _check_email_free(db, email)
    phone = phone.strip() if phone else None
    if phone:
        _check_phone(db, phone)

    vendor = Vendor(
        name=name.strip(),
        email=email,
        password_hash=get_password_hash(password),
        description=description or "",
        phone=phone,
        logo=logo
    )

    try:
        db.add(vendor)
        db.commit()
        db.refresh(vendor)
    except Exception:
        db.rollback()
        raise

    logger.info(f"Vendor created: {vendor.email} ({vendor.id})")
    return vendor

def update_vendor(
    db: Session,
    vendor_id: str,
    name: Optional[str] = None,
    email: Optional[str] = None,
    password: Optional[str] = None,
    description: Optional[str] = None,
    phone: Optional[str] = None,
    logo: Optional[str] = None
) -> Vendor:
    """Partial update: only supplied fields change; a new logo replaces the old file"""
    vendor = get_vendor(db, vendor_id)

    if name and name.strip():
        vendor.name = name.strip()

    if email and _normalize_email(email) != vendor.email:
        email = _normalize_email(email)
        _check_email_free(db, email, exclude_id=vendor_id)
        vendor.email = email

    if phone and phone.strip() != vendor.phone:
        phone = phone.strip()
        _check_phone(db, phone, exclude_id=vendor_id)
        vendor.phone = phone

    if password:
        vendor.password_hash = get_password_hash(password)

    if description is not None:
        vendor.description = description

    old_logo = None
    if logo:
        old_logo = vendor.logo
        vendor.logo = logo

    try:
        db.commit()
        db.refresh(vendor)
    except Exception:
        db.rollback()
        raise

    if old_logo:
        remove_files([old_logo])
    logger.info(f"Vendor updated: {vendor.email} ({vendor.id})")
    return vendor

def delete_vendor(db: Session, vendor_id: str) -> None:
    """Delete a vendor together with its products, logo and media files"""
    vendor = get_vendor(db, vendor_id)

    files = [vendor.logo]
    products = db.query(Product).filter(Product.vendor_id == vendor_id).all()
    for product in products:
        files.extend(product.media_files)

    try:
        for product in products:
            db.delete(product)
        db.delete(vendor)
        db.commit()
    except Exception:
        db.rollback()
        raise

    remove_files(files)
    logger.info(f"Vendor deleted: {vendor_id} with {len(products)} products")
