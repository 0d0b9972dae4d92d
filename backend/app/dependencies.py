"""FastAPI dependency injection providers for services on ``app.state``."""

from typing import Annotated

from fastapi import Depends, Request, WebSocket

from backend.app.services.broadcaster import BroadcastCoordinator
from backend.app.services.channel_registry import ChannelRegistry
from backend.app.services.ws_manager import ConnectionManager


def get_registry(request: Request) -> ChannelRegistry:
    return request.app.state.registry


def get_connections(request: Request) -> ConnectionManager:
    return request.app.state.connections


# WebSocket-specific dependencies (WebSocket routes don't have Request)
def get_connections_ws(websocket: WebSocket) -> ConnectionManager:
    return websocket.app.state.connections


def get_coordinator_ws(websocket: WebSocket) -> BroadcastCoordinator:
    return websocket.app.state.coordinator


RegistryDep = Annotated[ChannelRegistry, Depends(get_registry)]
ConnectionsDep = Annotated[ConnectionManager, Depends(get_connections)]
ConnectionsWsDep = Annotated[ConnectionManager, Depends(get_connections_ws)]
CoordinatorWsDep = Annotated[BroadcastCoordinator, Depends(get_coordinator_ws)]
