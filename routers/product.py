from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session
from typing import List, Optional, Tuple
import logging

from database.connection import get_db
from core.messages import get_message
from core.response import message_response
from services.media import IMAGE, VIDEO, remove_files, save_uploads
from services.product import (
    list_approved,
    list_all,
    list_by_vendor,
    create_product,
    set_approval,
    update_product,
    delete_product
)
from schemas.account import CurrentAccount
from schemas.product import ProductResponse
from routers.auth import require_admin, require_vendor

logger = logging.getLogger(__name__)

router = APIRouter()

def _store_media(
    images: Optional[List[UploadFile]],
    videos: Optional[List[UploadFile]]
) -> Tuple[List[str], List[str]]:
    saved_images = save_uploads(images, IMAGE)
    try:
        saved_videos = save_uploads(videos, VIDEO)
    except Exception:
        remove_files(saved_images)
        raise
    return saved_images, saved_videos

@router.get("", response_model=List[ProductResponse])
def get_products(db: Session = Depends(get_db)):
    """Public catalog of approved products"""
    return [ProductResponse.from_orm(p) for p in list_approved(db)]

@router.get("/all-products", response_model=List[ProductResponse])
def get_all_products(
    current_account: CurrentAccount = Depends(require_admin),
    db: Session = Depends(get_db)
):
    return [ProductResponse.from_orm(p) for p in list_all(db)]

@router.get("/my-products", response_model=List[ProductResponse])
def get_my_products(
    current_account: CurrentAccount = Depends(require_vendor),
    db: Session = Depends(get_db)
):
    """Every product of the calling vendor, approved or not"""
    products = list_by_vendor(db, current_account.id, approved_only=False)
    return [ProductResponse.from_orm(p) for p in products]

@router.get("/vendor/{vendor_id}", response_model=List[ProductResponse])
def get_vendor_products(vendor_id: str, db: Session = Depends(get_db)):
    products = list_by_vendor(db, vendor_id, approved_only=True)
    return [ProductResponse.from_orm(p) for p in products]

@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_vendor_product(
    name: Optional[str] = Form(None),
    type: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    quantity_per_carton: Optional[str] = Form(None),
    manufacturer: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    images: Optional[List[UploadFile]] = File(None),
    videos: Optional[List[UploadFile]] = File(None),
    current_account: CurrentAccount = Depends(require_vendor),
    db: Session = Depends(get_db)
):
    """Create a product awaiting admin approval"""
    attrs = {
        "name": name,
        "type": type,
        "price": price,
        "quantity_per_carton": quantity_per_carton,
        "manufacturer": manufacturer,
        "description": description
    }
    saved_images, saved_videos = _store_media(images, videos)
    try:
        product = create_product(db, current_account.id, attrs, saved_images, saved_videos)
    except Exception:
        remove_files(saved_images + saved_videos)
        raise
    return ProductResponse.from_orm(product)

@router.put("/{product_id}/approve", response_model=ProductResponse)
def approve_product(
    product_id: str,
    current_account: CurrentAccount = Depends(require_admin),
    db: Session = Depends(get_db)
):
    return ProductResponse.from_orm(set_approval(db, product_id, approved=True))

@router.put("/{product_id}/unapprove", response_model=ProductResponse)
def unapprove_product(
    product_id: str,
    current_account: CurrentAccount = Depends(require_admin),
    db: Session = Depends(get_db)
):
    return ProductResponse.from_orm(set_approval(db, product_id, approved=False))

@router.put("/{product_id}", response_model=ProductResponse)
def update_vendor_product(
    product_id: str,
    name: Optional[str] = Form(None),
    type: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    quantity_per_carton: Optional[str] = Form(None),
    manufacturer: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    images: Optional[List[UploadFile]] = File(None),
    videos: Optional[List[UploadFile]] = File(None),
    current_account: CurrentAccount = Depends(require_vendor),
    db: Session = Depends(get_db)
):
    """Update an owned product; uploaded images or videos replace the stored ones"""
    attrs = {
        "name": name,
        "type": type,
        "price": price,
        "quantity_per_carton": quantity_per_carton,
        "manufacturer": manufacturer,
        "description": description
    }
    saved_images, saved_videos = _store_media(images, videos)
    try:
        product = update_product(
            db,
            product_id,
            current_account,
            attrs,
            images=saved_images or None,
            videos=saved_videos or None
        )
    except Exception:
        remove_files(saved_images + saved_videos)
        raise
    return ProductResponse.from_orm(product)

@router.delete("/{product_id}")
def delete_vendor_product(
    product_id: str,
    current_account: CurrentAccount = Depends(require_vendor),
    db: Session = Depends(get_db)
):
    delete_product(db, product_id, current_account)
    return message_response(get_message("product.deleted"))
