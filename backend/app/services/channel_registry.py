"""In-memory channel registry: the single owner of all channel records.

Every operation runs under one lock and only touches process memory, so
callers on the HTTP and WebSocket paths can share one instance. Callers get
frozen ``Channel`` snapshots; records are only mutated through the methods
below.
"""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from backend.app.config import Settings
from backend.app.errors import NotFoundError, ValidationError
from backend.app.models.channel import Channel
from backend.app.models.message import Message

logger = logging.getLogger(__name__)

_NAME_CHARSET = re.compile(r"[A-Za-z0-9_-]*")


@dataclass(frozen=True)
class ChannelNamePolicy:
    """Channel name rules.

    The lenient variant only requires a non-empty string. The strict variant
    also bounds the length, restricts the charset and requires the name to be
    unique among live channels (case-sensitive).
    """

    strict: bool = True
    max_length: int = 15

    @classmethod
    def from_settings(cls, settings: Settings) -> ChannelNamePolicy:
        return cls(
            strict=settings.strict_channel_names,
            max_length=settings.channel_name_max_length,
        )

    def check_shape(self, name: Any) -> str:
        """Validate everything except uniqueness and return the name as ``str``."""
        if name is None:
            raise ValidationError("name parameter is missing")
        if not isinstance(name, str):
            raise ValidationError("name parameter is not a string value")
        if len(name) < 1:
            raise ValidationError("Channel name must be at least 1 character long")
        if not self.strict:
            return name
        if len(name) > self.max_length:
            raise ValidationError(
                f"Channel name must be at most {self.max_length} characters long"
            )
        if not _NAME_CHARSET.fullmatch(name):
            raise ValidationError(
                "Channel name may only contain letters, digits, underscores and hyphens"
            )
        return name


@dataclass
class _ChannelRecord:
    id: int
    name: str
    messages: list[Message] = field(default_factory=list)

    def snapshot(self) -> Channel:
        return Channel(id=self.id, name=self.name, messages=tuple(self.messages))


class ChannelRegistry:
    """Channel id allocation plus create/rename/delete/get/list.

    Ids start at 1 and are never reissued, even after the channel holding
    them is deleted. ``list_channels`` returns channels in creation order.
    """

    def __init__(
        self,
        policy: ChannelNamePolicy | None = None,
        seed: Iterable[str] = (),
    ) -> None:
        self._policy = policy or ChannelNamePolicy()
        self._channels: dict[int, _ChannelRecord] = {}
        self._next_id = 1
        self._lock = threading.Lock()

        for name in seed:
            self.create(name)

    def __len__(self) -> int:
        with self._lock:
            return len(self._channels)

    def create(self, name: Any) -> Channel:
        with self._lock:
            valid_name = self._validate_name(name)
            record = _ChannelRecord(id=self._next_id, name=valid_name)
            self._next_id += 1
            self._channels[record.id] = record
            channel = record.snapshot()

        logger.info("Created channel %s (id=%d)", channel.name, channel.id)
        return channel

    def rename(self, channel_id: int, name: Any) -> Channel:
        """Rename a channel, keeping its id and history.

        The channel being renamed is left out of the uniqueness check, so
        renaming a channel to its current name succeeds.
        """
        with self._lock:
            record = self._channels.get(channel_id)
            if record is None:
                raise NotFoundError("Channel not found")
            valid_name = self._validate_name(name, exclude_id=channel_id)
            old_name = record.name
            record.name = valid_name
            channel = record.snapshot()

        logger.info("Renamed channel %d: %s -> %s", channel_id, old_name, channel.name)
        return channel

    def delete(self, channel_id: int) -> bool:
        """Remove a channel and its history. Returns False if it was already gone."""
        with self._lock:
            record = self._channels.pop(channel_id, None)

        if record is None:
            return False
        logger.info("Deleted channel %s (id=%d)", record.name, channel_id)
        return True

    def get(self, channel_id: int) -> Channel | None:
        with self._lock:
            record = self._channels.get(channel_id)
            return record.snapshot() if record else None

    def list_channels(self) -> list[Channel]:
        with self._lock:
            return [record.snapshot() for record in self._channels.values()]

    def append_message(self, channel_id: int, message: Message) -> Channel:
        """Append to a channel's history; existence check and append are one step."""
        with self._lock:
            record = self._channels.get(channel_id)
            if record is None:
                raise NotFoundError("Channel not found")
            record.messages.append(message)
            return record.snapshot()

    def _validate_name(self, name: Any, exclude_id: int | None = None) -> str:
        # Caller holds self._lock
        valid_name = self._policy.check_shape(name)
        if self._policy.strict and any(
            record.name == valid_name and record.id != exclude_id
            for record in self._channels.values()
        ):
            raise ValidationError(f"Channel name '{valid_name}' is already in use")
        return valid_name
