from sqlalchemy.orm import Session
from sqlalchemy import func
from models.order import Order, OrderMessage
from schemas.account import CurrentAccount
from schemas.order import OrderMessageCreate
from core.exceptions import AuthorizationError, ValidationError
from core.messages import get_message
from services.order import get_order
from services.permissions import is_order_participant
from typing import List
import logging

logger = logging.getLogger(__name__)

def get_order_for_participant(db: Session, order_id: str, account: CurrentAccount) -> Order:
    order = get_order(db, order_id)
    if not is_order_participant(account, order):
        logger.warning(f"Account {account.id} is not a participant of order {order_id}")
        raise AuthorizationError(get_message("order.forbidden_view"))
    return order

def list_messages(db: Session, order: Order, account: CurrentAccount) -> List[OrderMessage]:
    """Return the order's message log in sequence order.

    Messages from the other participants are marked delivered and read.
    """
    messages = (
        db.query(OrderMessage)
        .filter(OrderMessage.order_id == order.id)
        .order_by(OrderMessage.sequence)
        .all()
    )

    changed = False
    for message in messages:
        if message.sender_id != account.id and not message.is_read:
            message.is_delivered = True
            message.is_read = True
            changed = True
    if changed:
        db.commit()
    return messages

def post_message(db: Session, order: Order, account: CurrentAccount, data: OrderMessageCreate) -> OrderMessage:
    """Append a message to the order's log with the next sequence number"""
    if not data.text and not data.image:
        raise ValidationError(get_message("message.empty"), field="text")

    last = db.query(func.max(OrderMessage.sequence)).filter(OrderMessage.order_id == order.id).scalar()
    message = OrderMessage(
        order_id=order.id,
        sequence=(last or 0) + 1,
        sender_role=account.role.value,
        sender_id=account.id,
        text=data.text,
        image=data.image
    )

    try:
        db.add(message)
        db.commit()
        db.refresh(message)
    except Exception:
        db.rollback()
        raise

    logger.info(f"Message {message.sequence} posted on order {order.id} by {account.role.value} {account.id}")
    return message
