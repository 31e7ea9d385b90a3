from sqlalchemy.orm import Session, joinedload
from sqlalchemy import desc
from models.product import Product
from schemas.account import CurrentAccount
from core.config import settings
from core.exceptions import ResourceNotFoundError, ValidationError
from core.messages import get_message
from services.media import remove_files
from services.permissions import can_mutate
from typing import Any, Dict, List, Optional
import logging
import math

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "type", "price", "quantity_per_carton", "manufacturer")
TEXT_FIELDS = ("name", "type", "manufacturer", "description")

def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())

def validate_media(images: List[str], videos: List[str]) -> None:
    """A product with videos must also carry at least one image."""
    if len(images) > settings.MAX_PRODUCT_IMAGES:
        raise ValidationError(get_message("product.too_many_images", limit=settings.MAX_PRODUCT_IMAGES))
    if len(videos) > settings.MAX_PRODUCT_VIDEOS:
        raise ValidationError(get_message("product.too_many_videos", limit=settings.MAX_PRODUCT_VIDEOS))
    if videos and not images:
        raise ValidationError(get_message("product.video_requires_image"), field="images")

def _clean_attrs(attrs: Dict[str, Any]) -> Dict[str, Any]:
    """Coerce form values to column types, dropping fields that were not sent."""
    cleaned = {}
    for field, value in attrs.items():
        if value is None:
            continue
        if field in TEXT_FIELDS:
            value = value.strip()
            if field != "description" and not value:
                raise ValidationError(get_message("product.required_fields", fields=field), field=field)
        elif field == "price":
            try:
                value = float(value)
            except (TypeError, ValueError):
                raise ValidationError(f"price: {value!r}", field="price")
            if not math.isfinite(value) or value < 0:
                raise ValidationError(f"price: {value!r}", field="price")
        elif field == "quantity_per_carton":
            try:
                value = int(value)
            except (TypeError, ValueError):
                raise ValidationError(f"quantity_per_carton: {value!r}", field="quantity_per_carton")
            if value < 1:
                raise ValidationError(f"quantity_per_carton: {value!r}", field="quantity_per_carton")
        else:
            continue
        cleaned[field] = value
    return cleaned

def _with_vendor(db: Session):
    return db.query(Product).options(joinedload(Product.vendor))

def list_approved(db: Session) -> List[Product]:
    """Public catalog: approved products only"""
    return _with_vendor(db).filter(Product.approved.is_(True)).order_by(desc(Product.created_at)).all()

def list_all(db: Session) -> List[Product]:
    """Every product regardless of approval (admin view)"""
    return _with_vendor(db).order_by(desc(Product.created_at)).all()

def list_by_vendor(db: Session, vendor_id: str, approved_only: bool) -> List[Product]:
    query = _with_vendor(db).filter(Product.vendor_id == vendor_id)
    if approved_only:
        query = query.filter(Product.approved.is_(True))
    return query.order_by(desc(Product.created_at)).all()

def create_product(
    db: Session,
    vendor_id: str,
    attrs: Dict[str, Any],
    images: List[str],
    videos: List[str]
) -> Product:
    """Create an unapproved product owned by ``vendor_id``"""
    missing = [field for field in REQUIRED_FIELDS if _blank(attrs.get(field))]
    if missing:
        raise ValidationError(get_message("product.required_fields", fields=", ".join(missing)))
    validate_media(images, videos)

    product = Product(
        vendor_id=vendor_id,
        images=list(images),
        videos=list(videos),
        approved=False,
        **_clean_attrs(attrs)
    )

    try:
        db.add(product)
        db.commit()
        db.refresh(product)
    except Exception:
        db.rollback()
        raise

    logger.info(f"Product created: {product.name} ({product.id}) by vendor {vendor_id}")
    return product

def set_approval(db: Session, product_id: str, approved: bool = True) -> Product:
    """Flip the approval flag; setting it to its current value is a no-op"""
    product = _with_vendor(db).filter(Product.id == product_id).first()
    if not product:
        raise ResourceNotFoundError(get_message("product.not_found"), "Product", product_id)

    if product.approved != approved:
        product.approved = approved
        db.commit()
        db.refresh(product)
        logger.info(f"Product {product_id} {'approved' if approved else 'unapproved'}")
    return product

def get_owned_product(db: Session, product_id: str, account: CurrentAccount) -> Product:
    """Load a product the account may mutate.

    Absent and foreign products raise the same not-found error.
    """
    product = _with_vendor(db).filter(Product.id == product_id).first()
    if not product or not can_mutate(account, product):
        if product:
            logger.warning(f"Account {account.id} denied mutation of product {product_id}")
        raise ResourceNotFoundError(get_message("product.not_found"), "Product", product_id)
    return product

def update_product(
    db: Session,
    product_id: str,
    account: CurrentAccount,
    attrs: Dict[str, Any],
    images: Optional[List[str]] = None,
    videos: Optional[List[str]] = None
) -> Product:
    """Update an owned product; a supplied media list replaces the stored one"""
    product = get_owned_product(db, product_id, account)

    new_images = list(images) if images else list(product.images or [])
    new_videos = list(videos) if videos else list(product.videos or [])
    validate_media(new_images, new_videos)
    cleaned = _clean_attrs(attrs)

    replaced = []
    if images:
        replaced.extend(product.images or [])
    if videos:
        replaced.extend(product.videos or [])

    try:
        for field, value in cleaned.items():
            setattr(product, field, value)
        product.images = new_images
        product.videos = new_videos
        db.commit()
        db.refresh(product)
    except Exception:
        db.rollback()
        raise

    remove_files(replaced)
    logger.info(f"Product updated: {product_id} by vendor {account.id}")
    return product

def delete_product(db: Session, product_id: str, account: CurrentAccount) -> None:
    """Delete an owned product and, best-effort, its media files"""
    product = get_owned_product(db, product_id, account)
    files = product.media_files

    try:
        db.delete(product)
        db.commit()
    except Exception:
        db.rollback()
        raise

    remove_files(files)
    logger.info(f"Product deleted: {product_id} by vendor {account.id}")
