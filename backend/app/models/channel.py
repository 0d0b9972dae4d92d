from __future__ import annotations

from dataclasses import dataclass, field

from backend.app.models.message import Message


@dataclass(frozen=True)
class Channel:
    """Read-only snapshot of a channel record owned by the registry."""

    id: int
    name: str
    messages: tuple[Message, ...] = field(default_factory=tuple)
