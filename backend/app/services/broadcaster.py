"""Broadcast coordinator for inbound chat frames.

One call to ``handle_frame`` validates a frame, appends the message to its
channel through the registry, then relays the frame to every connected
client. Failures are reported to the sending connection only and never
close it.
"""

from __future__ import annotations

import logging

from starlette.websockets import WebSocket

from backend.app.errors import NotFoundError
from backend.app.models.message import Message
from backend.app.schemas.message import FrameRejection, error_frame, parse_frame
from backend.app.services.channel_registry import ChannelRegistry
from backend.app.services.ws_manager import ConnectionManager

logger = logging.getLogger(__name__)


class BroadcastCoordinator:
    def __init__(self, registry: ChannelRegistry, connections: ConnectionManager) -> None:
        self._registry = registry
        self._connections = connections

    async def handle_frame(self, sender: WebSocket, raw: str | bytes) -> bool:
        """Process one inbound frame. Returns True if it was broadcast."""
        logger.debug("Received frame: %r", raw)

        outcome = parse_frame(raw)
        if isinstance(outcome, FrameRejection):
            await self._reject(sender, outcome.message)
            return False

        frame = outcome.frame
        try:
            # Registry lock is released before any socket I/O below
            self._registry.append_message(
                frame.channel_id, Message(user_name=frame.user_name, text=frame.text)
            )
        except NotFoundError as exc:
            await self._reject(sender, exc.message)
            return False

        delivered = await self._connections.broadcast(outcome.payload)
        logger.debug(
            "Relayed message from %s in channel %d to %d client(s)",
            frame.user_name,
            frame.channel_id,
            delivered,
        )
        return True

    async def _reject(self, sender: WebSocket, message: str) -> None:
        logger.info("Rejected frame: %s", message)
        await self._connections.send_personal(sender, error_frame(message))
