"""WebSocket endpoint for real-time chat messages.

Clients connect at /messages. Every frame is handled independently; there is
no per-connection session state.

Protocol:
  Client -> Server (JSON):
    {"type": "message", "channelId": 1, "userName": "al", "text": "hi"}
    (text or UTF-8 binary frames)

  Server -> every client (JSON), on success:
    the client's frame, unchanged

  Server -> sender only (JSON), on failure:
    {"type": "error", "message": "..."}
"""

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from loguru import logger

from backend.app.dependencies import ConnectionsWsDep, CoordinatorWsDep

router = APIRouter()


@router.websocket("/messages")
async def messages_endpoint(
    ws: WebSocket,
    connections: ConnectionsWsDep,
    coordinator: CoordinatorWsDep,
) -> None:
    """Chat relay endpoint; accepted messages go to every connected client."""
    conn_id = await connections.accept(ws)

    try:
        while True:
            message = await ws.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))

            # Binary frames are parsed like text ones
            raw = message.get("text")
            if raw is None:
                raw = message.get("bytes") or b""
            await coordinator.handle_frame(ws, raw)

    except WebSocketDisconnect:
        logger.info("WS client {} disconnected normally", conn_id)
    except Exception:
        logger.exception("WS error for client {}", conn_id)
    finally:
        connections.disconnect(ws)
