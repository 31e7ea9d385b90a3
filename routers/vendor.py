from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from database.connection import get_db
from core.exceptions import ValidationError
from core.messages import get_message
from core.response import message_response
from services.media import remove_files, save_logo
from services.vendor import list_vendors, create_vendor, update_vendor, delete_vendor
from schemas.account import CurrentAccount, VendorResponse
from routers.auth import require_admin

logger = logging.getLogger(__name__)

router = APIRouter()

email_adapter = TypeAdapter(EmailStr)

def _check_email_format(email: Optional[str]) -> None:
    # Form fields get the same EmailStr rule as JSON registration
    if not email or not email.strip():
        return
    try:
        email_adapter.validate_python(email.strip())
    except PydanticValidationError:
        raise ValidationError(get_message("vendor.invalid_email"), field="email")

@router.get("", response_model=List[VendorResponse])
def get_vendors(db: Session = Depends(get_db)):
    """Public vendor directory"""
    return [VendorResponse.from_orm(v) for v in list_vendors(db)]

@router.post("", status_code=status.HTTP_201_CREATED)
def create_new_vendor(
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    logo: Optional[UploadFile] = File(None),
    current_account: CurrentAccount = Depends(require_admin),
    db: Session = Depends(get_db)
):
    _check_email_format(email)
    logo_name = save_logo(logo) if logo and logo.filename else None
    try:
        vendor = create_vendor(
            db,
            name=name,
            email=email,
            password=password,
            description=description,
            phone=phone,
            logo=logo_name,
            require_phone=True
        )
    except Exception:
        remove_files([logo_name])
        raise
    return message_response(get_message("vendor.created"), vendor=VendorResponse.from_orm(vendor))

@router.put("/{vendor_id}")
def update_existing_vendor(
    vendor_id: str,
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    logo: Optional[UploadFile] = File(None),
    current_account: CurrentAccount = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Partial vendor update; a new logo replaces the stored one"""
    _check_email_format(email)
    logo_name = save_logo(logo) if logo and logo.filename else None
    try:
        vendor = update_vendor(
            db,
            vendor_id,
            name=name,
            email=email,
            password=password,
            description=description,
            phone=phone,
            logo=logo_name
        )
    except Exception:
        remove_files([logo_name])
        raise
    return message_response(get_message("vendor.updated"), vendor=VendorResponse.from_orm(vendor))

@router.delete("/{vendor_id}")
def delete_existing_vendor(
    vendor_id: str,
    current_account: CurrentAccount = Depends(require_admin),
    db: Session = Depends(get_db)
):
    delete_vendor(db, vendor_id)
    return message_response(get_message("vendor.deleted"))
