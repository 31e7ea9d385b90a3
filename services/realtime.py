import asyncio
import logging
import uuid
from datetime import datetime
from typing import Any, Dict

from fastapi import WebSocket

from schemas.account import CurrentAccount

logger = logging.getLogger(__name__)


class OrderRoomManager:
    """
    Publish/subscribe rooms keyed by order id.

    A connection joins exactly one order room and leaves it on disconnect.
    Broadcasts to a room are serialised by a per-room lock so every member
    receives the room's frames in the order they were published. Messages
    posted over REST are published from separate background tasks, so
    publish order can differ from message order; clients order message
    frames by their ``sequence`` and drop sequences they already hold.
    """

    def __init__(self):
        self.rooms: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def _lock(self, order_id: str) -> asyncio.Lock:
        if order_id not in self._locks:
            self._locks[order_id] = asyncio.Lock()
        return self._locks[order_id]

    def join(self, order_id: str, websocket: WebSocket, account: CurrentAccount) -> str:
        """Register an accepted websocket in the order's room"""
        connection_id = str(uuid.uuid4())
        self.rooms.setdefault(order_id, {})[connection_id] = {
            "websocket": websocket,
            "account_id": account.id,
            "role": account.role.value,
            "joined_at": datetime.utcnow()
        }
        logger.info(f"Connection {connection_id} ({account.role.value} {account.id}) joined order {order_id}")
        return connection_id

    def leave(self, order_id: str, connection_id: str) -> None:
        room = self.rooms.get(order_id)
        if not room or connection_id not in room:
            return
        del room[connection_id]
        if not room:
            del self.rooms[order_id]
            self._locks.pop(order_id, None)
        logger.info(f"Connection {connection_id} left order {order_id}")

    def members(self, order_id: str) -> int:
        return len(self.rooms.get(order_id, {}))

    async def broadcast(self, order_id: str, message: Dict[str, Any]) -> None:
        """Send ``message`` to every member of the room, dropping dead sockets"""
        if order_id not in self.rooms:
            return
        async with self._lock(order_id):
            dead = []
            for connection_id, info in list(self.rooms.get(order_id, {}).items()):
                try:
                    await info["websocket"].send_json(message)
                except Exception as e:
                    logger.error(f"Error sending to {connection_id} in order {order_id}: {str(e)}")
                    dead.append(connection_id)
            for connection_id in dead:
                self.leave(order_id, connection_id)


# Global room registry
order_rooms = OrderRoomManager()
