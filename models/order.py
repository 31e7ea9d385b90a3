import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Text, Integer, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from database.base import Base
import enum

class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    REJECTED = "rejected"

class Order(Base):
    __tablename__ = "orders"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    order_number = Column(Integer, unique=True, index=True, nullable=False)
    product_id = Column(String, ForeignKey("products.id", ondelete="SET NULL"), nullable=True, index=True)
    vendor_id = Column(String, ForeignKey("vendors.id", ondelete="SET NULL"), nullable=True, index=True)
    customer_id = Column(String, ForeignKey("customers.id", ondelete="SET NULL"), nullable=True, index=True)
    customer_name = Column(String, nullable=False, default="")
    phone = Column(String, nullable=False, default="", index=True)
    address = Column(Text, nullable=False, default="")
    quantity = Column(Integer, nullable=False)
    status = Column(
        Enum(OrderStatus, values_callable=lambda statuses: [s.value for s in statuses]),
        default=OrderStatus.PENDING,
        nullable=False,
        index=True
    )
    selected_image = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    product = relationship("Product", back_populates="orders")
    vendor = relationship("Vendor", back_populates="orders")
    customer = relationship("Customer", back_populates="orders")
    messages = relationship(
        "OrderMessage",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderMessage.sequence"
    )

class OrderMessage(Base):
    __tablename__ = "order_messages"
    __table_args__ = (UniqueConstraint("order_id", "sequence", name="uq_order_message_sequence"),)

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    order_id = Column(String, ForeignKey("orders.id"), nullable=False, index=True)
    sequence = Column(Integer, nullable=False)
    sender_role = Column(String, nullable=False)
    sender_id = Column(String, nullable=False)
    text = Column(Text, nullable=False, default="")
    image = Column(String, nullable=True)
    is_delivered = Column(Boolean, default=False, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    order = relationship("Order", back_populates="messages")
