"""Live push channels for the home feed and for conversations.

A socket joins exactly one named channel. Events are JSON encoded once per
publish and written to every socket on that channel; a socket whose write
fails is removed from the hub.
"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from fastapi import WebSocket, WebSocketDisconnect

logger = logging.getLogger(__name__)

FEED_CHANNEL = "feed"


class ChannelHub:
    def __init__(self) -> None:
        self._members: dict[str, set[WebSocket]] = {}
        self._channel_of: dict[WebSocket, str] = {}
        self._lock = asyncio.Lock()

    def listeners(self, channel: str) -> int:
        return len(self._members.get(channel, ()))

    async def join(self, channel: str, websocket: WebSocket) -> None:
        await websocket.accept()
        async with self._lock:
            self._members.setdefault(channel, set()).add(websocket)
            self._channel_of[websocket] = channel

    async def leave(self, websocket: WebSocket) -> None:
        async with self._lock:
            channel = self._channel_of.pop(websocket, None)
            members = self._members.get(channel) if channel else None
            if members is None:
                return
            members.discard(websocket)
            if not members:
                del self._members[channel]

    async def publish(self, channel: str | None, event: dict[str, Any]) -> int:
        """Send ``event`` to ``channel`` and return how many sockets received it."""

        if not channel or not event:
            return 0
        payload = json.dumps(event, default=str)
        async with self._lock:
            targets = list(self._members.get(channel, ()))

        delivered = 0
        for websocket in targets:
            try:
                await websocket.send_text(payload)
            except (WebSocketDisconnect, RuntimeError):
                logger.debug("Dropping closed socket on channel %s", channel)
                await self.leave(websocket)
            else:
                delivered += 1
        return delivered


hub = ChannelHub()


async def publish_feed_event(event: dict[str, Any]) -> int:
    return await hub.publish(FEED_CHANNEL, event)


async def publish_conversation_event(conversation_id: str, event_type: str, **fields: Any) -> int:
    return await hub.publish(conversation_id, {"type": event_type, "conversation_id": conversation_id, **fields})


__all__ = ["ChannelHub", "FEED_CHANNEL", "hub", "publish_feed_event", "publish_conversation_event"]
