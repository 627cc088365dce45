"""
WebSocket endpoints for live dashboard updates.
"""
import json
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from dialtester.core.websocket import manager, DASHBOARD_KEY, session_key
from dialtester.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


async def _serve(websocket: WebSocket, subscription_key: str):
    """Hold a subscribed connection open and handle client commands."""
    await manager.connect(websocket, subscription_key)
    await manager.send_personal_message(
        json.dumps({"type": "connected", "subscription_key": subscription_key}),
        websocket
    )

    try:
        while True:
            data = await websocket.receive_text()
            try:
                message = json.loads(data)
            except json.JSONDecodeError:
                # Plain-text keepalive
                if data == "ping":
                    await manager.send_personal_message("pong", websocket)
                continue

            if not isinstance(message, dict):
                continue

            if message.get("type") == "subscribe" and message.get("session_id"):
                key = session_key(message["session_id"])
                await manager.subscribe(websocket, key)
                await manager.send_personal_message(
                    json.dumps({"type": "subscribed", "subscription_key": key}), websocket
                )
            elif message.get("type") == "unsubscribe" and message.get("session_id"):
                key = session_key(message["session_id"])
                await manager.unsubscribe(websocket, key)
                await manager.send_personal_message(
                    json.dumps({"type": "unsubscribed", "subscription_key": key}), websocket
                )

    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected from {subscription_key}")
    finally:
        await manager.disconnect(websocket)


@router.websocket("/ws/dashboard")
async def websocket_dashboard_endpoint(websocket: WebSocket):
    """Stream session_created, data_point and session_completed events for every session."""
    await _serve(websocket, DASHBOARD_KEY)


@router.websocket("/ws/sessions/{session_id}")
async def websocket_session_endpoint(websocket: WebSocket, session_id: str):
    """Stream events for a single session."""
    await _serve(websocket, session_key(session_id))
