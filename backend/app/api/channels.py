"""Channel CRUD endpoints backed by the in-memory registry."""

from typing import Any

from fastapi import APIRouter, Body, HTTPException, Response

from backend.app.dependencies import RegistryDep
from backend.app.errors import NotFoundError, ValidationError
from backend.app.schemas.channel import ChannelResponse

router = APIRouter(prefix="/channels", tags=["channels"])


def _name_from(body: Any) -> Any:
    """Pull ``name`` from a request body; anything but a JSON object has none."""
    if isinstance(body, dict):
        return body.get("name")
    return None


@router.post("", response_model=ChannelResponse)
async def create_channel(
    registry: RegistryDep,
    body: Any = Body(default=None),
) -> ChannelResponse:
    name = _name_from(body)
    try:
        channel = registry.create(name)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=exc.message) from exc
    return ChannelResponse.from_channel(channel)


@router.get("", response_model=list[ChannelResponse])
async def list_channels(registry: RegistryDep) -> list[ChannelResponse]:
    return [ChannelResponse.from_channel(ch) for ch in registry.list_channels()]


@router.get("/{channel_id}", response_model=ChannelResponse)
async def get_channel(channel_id: int, registry: RegistryDep) -> ChannelResponse:
    channel = registry.get(channel_id)
    if not channel:
        raise HTTPException(status_code=404, detail="Channel not found")
    return ChannelResponse.from_channel(channel)


@router.patch("/{channel_id}", response_model=ChannelResponse)
async def rename_channel(
    channel_id: int,
    registry: RegistryDep,
    body: Any = Body(default=None),
) -> ChannelResponse:
    name = _name_from(body)
    try:
        channel = registry.rename(channel_id, name)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message) from exc
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=exc.message) from exc
    return ChannelResponse.from_channel(channel)


@router.delete("/{channel_id}")
async def delete_channel(channel_id: int, registry: RegistryDep) -> Response:
    if not registry.delete(channel_id):
        raise HTTPException(status_code=404, detail="Channel not found")
    return Response(status_code=200)
