from pydantic import BaseModel, Field, validator
from typing import Optional
from datetime import datetime

from models.order import OrderStatus
from schemas.account import CustomerSummary
from schemas.product import ProductSummary

class OrderCreate(BaseModel):
    product: str = Field(..., description="Product id")
    vendor: str = Field(..., description="Vendor id, must own the product")
    quantity: int = Field(..., ge=1)
    customer_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    selected_image: Optional[str] = None

class OrderStatusUpdate(BaseModel):
    status: str

class OrderEdit(BaseModel):
    quantity: Optional[int] = None
    address: Optional[str] = None

class OrderFilters(BaseModel):
    vendor_name: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    phone: Optional[str] = None

class OrderResponse(BaseModel):
    id: str
    order_number: int
    product_id: Optional[str] = None
    product: Optional[ProductSummary] = None
    vendor_id: Optional[str] = None
    customer_id: Optional[str] = None
    customer: Optional[CustomerSummary] = None
    customer_name: str = ""
    phone: str = ""
    address: str = ""
    quantity: int
    status: OrderStatus
    selected_image: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class OrderMessageCreate(BaseModel):
    text: str = ""
    image: Optional[str] = None

    @validator('text')
    def strip_text(cls, v):
        return (v or "").strip()

class OrderMessageResponse(BaseModel):
    id: str
    order_id: str
    sequence: int
    sender_role: str
    sender_id: str
    text: str
    image: Optional[str] = None
    is_delivered: bool
    is_read: bool
    created_at: datetime

    class Config:
        from_attributes = True
