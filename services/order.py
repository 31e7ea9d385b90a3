from sqlalchemy.orm import Session, joinedload
from sqlalchemy import desc, select
from models.account import AccountRole, Customer, Vendor
from models.counter import Counter
from models.order import Order, OrderStatus
from models.product import Product
from schemas.account import CurrentAccount
from schemas.order import OrderCreate, OrderEdit, OrderFilters
from core.config import settings
from core.exceptions import AuthorizationError, ConflictError, ResourceNotFoundError, ValidationError
from core.messages import get_message
from services.permissions import can_delete_order, can_edit_order_details, can_mutate
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)

ORDER_NUMBER_COUNTER = "orderNumber"

def next_sequence(db: Session, name: str) -> int:
    """Increment and return the named counter within the current transaction"""
    counter = db.query(Counter).filter(Counter.name == name).with_for_update().first()
    if counter is None:
        counter = Counter(name=name, seq=0)
        db.add(counter)
    counter.seq += 1
    db.flush()
    return counter.seq

def _with_relations(db: Session):
    return db.query(Order).options(
        joinedload(Order.product).joinedload(Product.vendor),
        joinedload(Order.customer)
    )

def get_order(db: Session, order_id: str) -> Order:
    order = _with_relations(db).filter(Order.id == order_id).first()
    if not order:
        raise ResourceNotFoundError(get_message("order.not_found"), "Order", order_id)
    return order

def create_order(db: Session, order_data: OrderCreate, customer_id: Optional[str] = None) -> Order:
    """Place an order for an existing product; guests pass no ``customer_id``"""
    product = db.query(Product).filter(Product.id == order_data.product).first()
    if not product:
        raise ResourceNotFoundError(get_message("product.not_found"), "Product", order_data.product)

    if order_data.vendor != product.vendor_id:
        logger.warning(
            f"Order rejected: vendor {order_data.vendor} does not own product {product.id}"
        )
        raise ConflictError(
            get_message("order.vendor_mismatch"),
            details={"product": product.id, "vendor": order_data.vendor}
        )

    customer_name = order_data.customer_name
    phone = order_data.phone
    if customer_id:
        customer = db.query(Customer).filter(Customer.id == customer_id).first()
        if not customer:
            raise ResourceNotFoundError(get_message("customer.not_found"), "Customer", customer_id)
        customer_name = customer_name or customer.name
        phone = phone or customer.phone

    try:
        order = Order(
            order_number=next_sequence(db, ORDER_NUMBER_COUNTER),
            product_id=product.id,
            vendor_id=product.vendor_id,
            customer_id=customer_id,
            customer_name=customer_name or "",
            phone=phone or "",
            address=order_data.address or "",
            quantity=order_data.quantity,
            status=OrderStatus.PENDING,
            selected_image=order_data.selected_image or settings.PLACEHOLDER_IMAGE
        )
        db.add(order)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Order #{order.order_number} created for product {product.id}"
                f" ({'customer ' + customer_id if customer_id else 'guest'})")
    return get_order(db, order.id)

def _scope(query, account: CurrentAccount):
    """Restrict ``query`` to the orders ``account`` is allowed to see"""
    if account.role == AccountRole.ADMIN:
        return query
    if account.role == AccountRole.VENDOR:
        owned_products = select(Product.id).where(Product.vendor_id == account.id)
        return query.filter(Order.product_id.in_(owned_products))
    if account.role == AccountRole.CUSTOMER:
        return query.filter(Order.customer_id == account.id)
    raise ValueError(f"Unhandled account role: {account.role!r}")

def list_orders(db: Session, account: CurrentAccount, filters: OrderFilters) -> List[Order]:
    """Role-scoped order listing with optional date, phone and vendor-name filters"""
    query = _scope(_with_relations(db), account)

    if filters.start_date:
        query = query.filter(Order.created_at >= filters.start_date)
    if filters.end_date:
        query = query.filter(Order.created_at <= filters.end_date)
    if filters.phone:
        query = query.filter(Order.phone.icontains(filters.phone, autoescape=True))
    if filters.vendor_name and account.role == AccountRole.ADMIN:
        matching_products = (
            select(Product.id)
            .join(Vendor, Product.vendor_id == Vendor.id)
            .where(Vendor.name.icontains(filters.vendor_name, autoescape=True))
        )
        query = query.filter(Order.product_id.in_(matching_products))

    orders = query.order_by(desc(Order.created_at), desc(Order.order_number)).all()
    logger.info(f"Listed {len(orders)} orders for {account.role.value} {account.id}")
    return orders

def update_order_status(db: Session, order_id: str, account: CurrentAccount, status: str) -> Order:
    """Set any valid status; only the owning vendor or an admin may do so"""
    order = get_order(db, order_id)
    if not can_mutate(account, order):
        logger.warning(f"Account {account.id} denied status change on order {order_id}")
        raise AuthorizationError(get_message("order.forbidden_status"))

    try:
        new_status = OrderStatus(status)
    except ValueError:
        raise ValidationError(get_message("order.invalid_status"), field="status")

    if order.status != new_status:
        logger.info(f"Order {order_id} status {order.status.value} -> {new_status.value}")
        order.status = new_status
        db.commit()
        db.refresh(order)
    return order

def edit_order(db: Session, order_id: str, account: CurrentAccount, edit: OrderEdit) -> Order:
    """Let the ordering customer change quantity or address while pending"""
    order = get_order(db, order_id)
    if not can_edit_order_details(account, order):
        raise AuthorizationError(get_message("order.forbidden_edit"))
    if order.status != OrderStatus.PENDING:
        raise AuthorizationError(get_message("order.not_pending"))

    if edit.quantity is not None:
        if edit.quantity < 1:
            raise ValidationError(get_message("order.invalid_quantity"), field="quantity")
        order.quantity = edit.quantity
    if edit.address is not None:
        order.address = edit.address

    db.commit()
    db.refresh(order)
    logger.info(f"Order {order_id} edited by customer {account.id}")
    return order

def delete_order(db: Session, order_id: str, account: CurrentAccount) -> None:
    order = get_order(db, order_id)
    if not can_delete_order(account, order):
        logger.warning(f"Account {account.id} denied deletion of order {order_id}")
        raise AuthorizationError(get_message("order.forbidden_delete"))

    try:
        db.delete(order)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(f"Order {order_id} deleted by {account.role.value} {account.id}")
