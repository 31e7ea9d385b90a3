from fastapi import APIRouter, WebSocket, WebSocketDisconnect, Depends, Query
from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session
from typing import Optional
import json
import logging

from database.connection import get_db
from core.exceptions import AuthenticationError, AuthorizationError, ResourceNotFoundError, ValidationError
from core.messages import get_message
from services.auth import decode_access_token
from services.order_messages import get_order_for_participant, list_messages, post_message
from services.realtime import order_rooms
from schemas.order import OrderMessageCreate, OrderMessageResponse
from routers.order import message_event

router = APIRouter()
logger = logging.getLogger(__name__)

# Close codes sent before the handshake is accepted
CLOSE_UNAUTHENTICATED = 4001
CLOSE_FORBIDDEN = 4003
CLOSE_NOT_FOUND = 4004

@router.websocket("/ws/orders/{order_id}")
async def order_room_endpoint(
    websocket: WebSocket,
    order_id: str,
    token: Optional[str] = Query(None),
    db: Session = Depends(get_db)
):
    """
    Live message stream for one order.

    The connection joins the order's room on connect and leaves it on
    disconnect. Every message posted on the order, over this socket or the
    REST endpoint, is broadcast to all members of the room.
    """
    if not token:
        await websocket.close(code=CLOSE_UNAUTHENTICATED, reason=get_message("auth.missing_token"))
        return

    try:
        account = decode_access_token(token)
    except AuthenticationError as e:
        await websocket.close(code=CLOSE_UNAUTHENTICATED, reason=e.message)
        return

    try:
        order = get_order_for_participant(db, order_id, account)
    except ResourceNotFoundError as e:
        await websocket.close(code=CLOSE_NOT_FOUND, reason=e.message)
        return
    except AuthorizationError as e:
        await websocket.close(code=CLOSE_FORBIDDEN, reason=e.message)
        return

    await websocket.accept()
    connection_id = order_rooms.join(order_id, websocket, account)

    try:
        history = [
            jsonable_encoder(OrderMessageResponse.from_orm(m))
            for m in list_messages(db, order, account)
        ]
        await websocket.send_json({"type": "joined", "order_id": order_id, "messages": history})

        while True:
            raw = await websocket.receive_text()
            try:
                data = json.loads(raw)
                if not isinstance(data, dict):
                    raise TypeError("message frame must be an object")
                message_data = OrderMessageCreate(**data)
                message = post_message(db, order, account, message_data)
            except (ValueError, TypeError) as e:
                await websocket.send_json({"type": "error", "message": f"Invalid message: {str(e)}"})
                continue
            except ValidationError as e:
                await websocket.send_json({"type": "error", "message": e.message})
                continue

            await order_rooms.broadcast(order_id, message_event(OrderMessageResponse.from_orm(message)))

    except WebSocketDisconnect:
        logger.info(f"Order room connection closed: {connection_id}")
    finally:
        order_rooms.leave(order_id, connection_id)
