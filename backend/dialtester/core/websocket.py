"""
WebSocket connection manager for live dashboard updates.
"""
from typing import Dict, Set, Optional
from fastapi import WebSocket
import json
import asyncio
from dialtester.core.logging import get_logger
from dialtester.core.metrics import websocket_connections_active

logger = get_logger(__name__)

DASHBOARD_KEY = "dashboard"


def session_key(session_id: str) -> str:
    """Subscription key for events about a single session."""
    return f"session_{session_id}"


class ConnectionManager:
    """Manages WebSocket connections for push updates."""

    def __init__(self):
        # subscription_key -> connected websockets ("dashboard", "session_<id>")
        self.active_connections: Dict[str, Set[WebSocket]] = {}
        self.websocket_subscriptions: Dict[WebSocket, Set[str]] = {}
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket, subscription_key: str, accept: bool = True):
        """
        Register a new WebSocket connection for a specific subscription.

        Args:
            websocket: WebSocket connection
            subscription_key: Subscription key (e.g. "dashboard", "session_<id>")
            accept: Whether to accept the websocket connection
        """
        if accept:
            await websocket.accept()

        async with self._lock:
            self.active_connections.setdefault(subscription_key, set()).add(websocket)
            if websocket not in self.websocket_subscriptions:
                websocket_connections_active.inc()
            self.websocket_subscriptions.setdefault(websocket, set()).add(subscription_key)

        logger.info(f"WebSocket connected for subscription {subscription_key}")

    async def subscribe(self, websocket: WebSocket, subscription_key: str):
        """Subscribe an existing connection to an additional channel."""
        async with self._lock:
            self.active_connections.setdefault(subscription_key, set()).add(websocket)
            self.websocket_subscriptions.setdefault(websocket, set()).add(subscription_key)

        logger.info(f"WebSocket subscribed to {subscription_key}")

    async def unsubscribe(self, websocket: WebSocket, subscription_key: str):
        """Unsubscribe an existing connection from a channel."""
        async with self._lock:
            self._discard(websocket, subscription_key)
            if websocket in self.websocket_subscriptions:
                self.websocket_subscriptions[websocket].discard(subscription_key)

        logger.info(f"WebSocket unsubscribed from {subscription_key}")

    async def disconnect(self, websocket: WebSocket):
        """Unregister a WebSocket connection from every subscription."""
        async with self._lock:
            subscriptions = self.websocket_subscriptions.pop(websocket, None)
            if subscriptions is None:
                return
            for sub_key in subscriptions:
                self._discard(websocket, sub_key)
            websocket_connections_active.dec()

        logger.info("WebSocket disconnected")

    def _discard(self, websocket: WebSocket, subscription_key: str) -> None:
        connections = self.active_connections.get(subscription_key)
        if connections is None:
            return
        connections.discard(websocket)
        if not connections:
            del self.active_connections[subscription_key]

    async def broadcast(self, subscription_key: str, data: dict):
        """
        Broadcast an update to all clients subscribed to a channel.

        Args:
            subscription_key: Subscription key
            data: Update data to send (will be JSON serialized)
        """
        if subscription_key not in self.active_connections:
            logger.debug(f"No active WebSocket connections for {subscription_key}")
            return

        message = json.dumps(data, default=str)
        disconnected = set()

        for websocket in self.active_connections[subscription_key].copy():
            try:
                await websocket.send_text(message)
            except Exception as e:
                logger.error(f"Error sending to websocket: {e}")
                disconnected.add(websocket)

        for websocket in disconnected:
            await self.disconnect(websocket)

    async def broadcast_session_event(self, event_type: str, session_id: str, payload: Optional[dict] = None):
        """
        Push a session event to the dashboard channel and the session's own channel.

        Args:
            event_type: "session_created", "data_point" or "session_completed"
            session_id: Session the event belongs to
            payload: Serialized row
        """
        message = {"type": event_type, "session_id": session_id, **(payload or {})}
        await self.broadcast(DASHBOARD_KEY, message)
        await self.broadcast(session_key(session_id), message)

    async def send_personal_message(self, message: str, websocket: WebSocket):
        """Send a message to a specific WebSocket connection."""
        try:
            await websocket.send_text(message)
        except Exception as e:
            logger.debug(f"WebSocket send failed (likely disconnected): {e}")

    def get_connection_count(self, subscription_key: str) -> int:
        """Number of active connections for a subscription."""
        return len(self.active_connections.get(subscription_key, set()))


# Global connection manager instance
manager = ConnectionManager()
