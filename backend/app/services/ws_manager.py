"""WebSocket connection manager for real-time broadcasts.

Tracks connected WebSocket clients and fans frames out to all of them.
There are no subscriptions: every accepted chat message goes to every
connected client, the sender included.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any

from starlette.websockets import WebSocket, WebSocketState

logger = logging.getLogger(__name__)


@dataclass
class WSClient:
    """A connected WebSocket client. Holds nothing beyond the transport handle."""

    ws: WebSocket


class ConnectionManager:
    """Manages WebSocket connections and broadcasts frames.

    Safe for async usage within a single event loop (FastAPI). ``broadcast_text``
    works on a snapshot of the live set, so clients that connect or disconnect
    mid-broadcast may or may not receive that frame.
    """

    def __init__(self) -> None:
        # Map of connection_id -> WSClient
        self._clients: dict[int, WSClient] = {}

    @property
    def active_count(self) -> int:
        return len(self._clients)

    async def accept(self, ws: WebSocket) -> int:
        """Accept a new WebSocket connection and return its connection ID."""
        await ws.accept()
        conn_id = id(ws)
        self._clients[conn_id] = WSClient(ws=ws)
        logger.info("WS client connected: %s", conn_id)
        return conn_id

    def disconnect(self, ws: WebSocket) -> None:
        """Remove a WebSocket connection."""
        conn_id = id(ws)
        if conn_id in self._clients:
            del self._clients[conn_id]
            logger.info("WS client disconnected: %s", conn_id)

    async def send_personal(self, ws: WebSocket, event: dict[str, Any]) -> None:
        """Send a frame to one client only (error replies)."""
        await ws.send_text(json.dumps(event, allow_nan=False))

    async def broadcast(self, event: dict[str, Any]) -> int:
        """Serialize ``event`` and send it to every connected client."""
        return await self.broadcast_text(json.dumps(event, allow_nan=False))

    async def broadcast_text(self, payload: str) -> int:
        """Send a text frame to every connected client.

        Sends run concurrently; a slow or failing client neither delays nor
        fails delivery to the others. Clients whose send fails are dropped.
        Returns the number of clients the frame was delivered to.
        """
        targets = list(self._clients.items())
        results = await asyncio.gather(
            *(self._send(conn_id, client, payload) for conn_id, client in targets)
        )

        # Clean up dead connections
        dead = [conn_id for (conn_id, _), ok in zip(targets, results) if not ok]
        for conn_id in dead:
            self._clients.pop(conn_id, None)

        return sum(results)

    async def _send(self, conn_id: int, client: WSClient, payload: str) -> bool:
        try:
            if client.ws.client_state != WebSocketState.CONNECTED:
                return False
            await client.ws.send_text(payload)
        except Exception:
            logger.warning("Failed to send to WS %s, removing", conn_id)
            return False
        return True

    async def close_all(self) -> None:
        """Close all connections gracefully (for shutdown)."""
        for conn_id, client in list(self._clients.items()):
            try:
                if client.ws.client_state == WebSocketState.CONNECTED:
                    await client.ws.close(code=1001, reason="Server shutting down")
            except Exception:
                logger.debug("WS %s already gone during shutdown", conn_id)
        self._clients.clear()
