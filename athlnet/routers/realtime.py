"""WebSocket endpoints for feed refreshes and live conversations."""
from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect, status
from sqlalchemy.orm import Session

from ..constants import SESSION_COOKIE_NAME
from ..database import get_session
from ..services import decode_access_token
from ..services.message_service import get_conversation_for_member
from ..services.realtime import FEED_CHANNEL, hub

router = APIRouter()
logger = logging.getLogger(__name__)

# client keep-alive frames and what the feed socket answers them with
_FEED_REPLIES = {"ping": "pong", "hello": "ready"}


def _frame_type(raw: str) -> str:
    """Feed clients send either a bare word or ``{"type": ...}``."""

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError:
        return raw.strip().lower()
    if isinstance(payload, dict):
        return str(payload.get("type") or "").lower()
    return ""


@router.websocket("/ws/feed")
async def feed_updates(websocket: WebSocket) -> None:
    await hub.join(FEED_CHANNEL, websocket)
    logger.info("Feed socket connected from %s", websocket.client)
    try:
        while True:
            reply = _FEED_REPLIES.get(_frame_type(await websocket.receive_text()))
            if reply:
                await websocket.send_text(json.dumps({"type": reply}))
    except WebSocketDisconnect:
        logger.info("Feed socket disconnected from %s", websocket.client)
    finally:
        await hub.leave(websocket)


@router.websocket("/ws/conversations/{conversation_id}")
async def conversation_socket(
    websocket: WebSocket,
    conversation_id: str,
    token: str | None = Query(default=None),
    db: Session = Depends(get_session),
) -> None:
    """Live message events for one conversation; members only."""

    raw_token = token or websocket.cookies.get(SESSION_COOKIE_NAME)
    try:
        if not raw_token:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
        user_id = decode_access_token(raw_token)
        get_conversation_for_member(db, conversation_id=conversation_id, user_id=user_id)
    except HTTPException as exc:
        logger.info("Rejected conversation socket for %s: %s", conversation_id, exc.detail)
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await hub.join(conversation_id, websocket)
    await websocket.send_text(json.dumps({"type": "ready", "conversation_id": conversation_id}))
    try:
        while True:
            if (await websocket.receive_text()).strip().lower() == "ping":
                await websocket.send_text(json.dumps({"type": "pong", "conversation_id": conversation_id}))
    except WebSocketDisconnect:
        logger.debug("Conversation socket closed on %s", conversation_id)
    finally:
        await hub.leave(websocket)


__all__ = ["router"]
