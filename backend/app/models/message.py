from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Message:
    """One chat message in a channel's history. Never edited after append."""

    user_name: str
    text: str
