from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime

from schemas.account import VendorSummary

class ProductResponse(BaseModel):
    id: str
    vendor_id: str
    vendor: Optional[VendorSummary] = None
    name: str
    type: str
    price: float
    quantity_per_carton: int
    manufacturer: str
    description: Optional[str] = None
    images: List[str] = []
    videos: List[str] = []
    approved: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class ProductSummary(BaseModel):
    id: str
    name: str
    vendor: Optional[VendorSummary] = None

    class Config:
        from_attributes = True
