from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime
import logging

from database.connection import get_db
from core.messages import get_message
from core.response import message_response
from models.account import AccountRole
from services.order import create_order, list_orders, update_order_status, edit_order, delete_order
from services.order_messages import get_order_for_participant, list_messages, post_message
from services.realtime import order_rooms
from schemas.account import CurrentAccount
from schemas.order import (
    OrderCreate,
    OrderEdit,
    OrderFilters,
    OrderMessageCreate,
    OrderMessageResponse,
    OrderResponse,
    OrderStatusUpdate
)
from routers.auth import get_current_account, get_optional_account

logger = logging.getLogger(__name__)

router = APIRouter()

def message_event(message: OrderMessageResponse) -> dict:
    """Websocket frame announcing a new order message"""
    return {
        "type": "message",
        "order_id": message.order_id,
        "message": jsonable_encoder(message)
    }

@router.get("", response_model=List[OrderResponse])
def get_orders(
    vendor_name: Optional[str] = Query(None),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    phone: Optional[str] = Query(None),
    current_account: CurrentAccount = Depends(get_current_account),
    db: Session = Depends(get_db)
):
    """Orders visible to the caller's role, newest first"""
    filters = OrderFilters(vendor_name=vendor_name, start_date=start_date, end_date=end_date, phone=phone)
    return [OrderResponse.from_orm(o) for o in list_orders(db, current_account, filters)]

@router.post("", status_code=status.HTTP_201_CREATED)
def place_order(
    order_data: OrderCreate,
    current_account: Optional[CurrentAccount] = Depends(get_optional_account),
    db: Session = Depends(get_db)
):
    """Public order placement; a logged-in customer is recorded on the order"""
    customer_id = None
    if current_account and current_account.role == AccountRole.CUSTOMER:
        customer_id = current_account.id
    order = create_order(db, order_data, customer_id=customer_id)
    return message_response(get_message("order.created"), order=OrderResponse.from_orm(order))

@router.put("/{order_id}/status")
def change_order_status(
    order_id: str,
    status_data: OrderStatusUpdate,
    current_account: CurrentAccount = Depends(get_current_account),
    db: Session = Depends(get_db)
):
    order = update_order_status(db, order_id, current_account, status_data.status)
    return message_response(get_message("order.status_updated"), order=OrderResponse.from_orm(order))

@router.put("/{order_id}")
def change_order_details(
    order_id: str,
    edit: OrderEdit,
    current_account: CurrentAccount = Depends(get_current_account),
    db: Session = Depends(get_db)
):
    """Customer edit of quantity or address while the order is pending"""
    order = edit_order(db, order_id, current_account, edit)
    return message_response(get_message("order.updated"), order=OrderResponse.from_orm(order))

@router.delete("/{order_id}")
def remove_order(
    order_id: str,
    current_account: CurrentAccount = Depends(get_current_account),
    db: Session = Depends(get_db)
):
    delete_order(db, order_id, current_account)
    return message_response(get_message("order.deleted"))

@router.get("/{order_id}/messages", response_model=List[OrderMessageResponse])
def get_order_messages(
    order_id: str,
    current_account: CurrentAccount = Depends(get_current_account),
    db: Session = Depends(get_db)
):
    order = get_order_for_participant(db, order_id, current_account)
    return [OrderMessageResponse.from_orm(m) for m in list_messages(db, order, current_account)]

@router.post("/{order_id}/messages", response_model=OrderMessageResponse, status_code=status.HTTP_201_CREATED)
def send_order_message(
    order_id: str,
    message_data: OrderMessageCreate,
    background_tasks: BackgroundTasks,
    current_account: CurrentAccount = Depends(get_current_account),
    db: Session = Depends(get_db)
):
    order = get_order_for_participant(db, order_id, current_account)
    message = OrderMessageResponse.from_orm(post_message(db, order, current_account, message_data))
    background_tasks.add_task(order_rooms.broadcast, order_id, message_event(message))
    return message
