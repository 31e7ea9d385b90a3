import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Float, Integer, Text, JSON
from sqlalchemy.orm import relationship
from database.base import Base

class Product(Base):
    __tablename__ = "products"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    vendor_id = Column(String, ForeignKey("vendors.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)
    price = Column(Float, nullable=False)
    quantity_per_carton = Column(Integer, nullable=False)
    manufacturer = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    images = Column(JSON, nullable=False, default=list)  # ordered upload filenames
    videos = Column(JSON, nullable=False, default=list)
    approved = Column(Boolean, default=False, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    vendor = relationship("Vendor", back_populates="products")
    orders = relationship("Order", back_populates="product")

    @property
    def media_files(self):
        return list(self.images or []) + list(self.videos or [])
