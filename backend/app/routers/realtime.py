"""Realtime WebSocket endpoint.

Connect with ``WS /api/realtime/ws?token=<jwt>``. The server sends a
``connected`` frame, then every committed event addressed to the user.
Clients may send ``{"type": "ping"}`` and receive ``{"type": "pong"}``.
"""

import asyncio
import logging

from fastapi import APIRouter, HTTPException, Query, WebSocket, WebSocketDisconnect

from app.database import SessionLocal
from app.middleware.auth_middleware import resolve_user
from app.services.realtime_service import RealtimeEvent, RealtimeEventType, hub

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/realtime", tags=["realtime"])


def _authenticate(token: str):
    db = SessionLocal()
    try:
        user = resolve_user(db, token)
        return user.user_id, user.role
    finally:
        db.close()


async def _forward(websocket: WebSocket, queue: asyncio.Queue) -> None:
    while True:
        message = await queue.get()
        await websocket.send_json(message)


@router.websocket("/ws")
async def realtime_socket(websocket: WebSocket, token: str = Query(...)):
    try:
        user_id, role = _authenticate(token)
    except HTTPException as exc:
        await websocket.close(code=4001, reason=str(exc.detail))
        return

    await websocket.accept()
    subscription = hub.subscribe(user_id)
    forwarder = asyncio.create_task(_forward(websocket, subscription.queue))
    await websocket.send_json(
        RealtimeEvent(RealtimeEventType.CONNECTED, [user_id], {"user_id": user_id, "role": role}).to_message()
    )
    try:
        while True:
            try:
                data = await websocket.receive_json()
            except ValueError:
                logger.debug("ignoring non-JSON frame from user %s", user_id)
                continue
            if isinstance(data, dict) and data.get("type") == "ping":
                await websocket.send_json(RealtimeEvent(RealtimeEventType.PONG, [user_id], {}).to_message())
    except WebSocketDisconnect:
        logger.info("realtime socket closed for user %s", user_id)
    finally:
        forwarder.cancel()
        hub.unsubscribe(subscription)
