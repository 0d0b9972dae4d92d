"""Inbound chat frame parsing for the /messages WebSocket.

``parse_frame`` turns a raw text or binary frame into either a ``ParsedFrame`` or a
``FrameRejection``; the caller branches on the variant and never inspects
the raw payload itself.
"""

import json
import math
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from backend.app.errors import ChatError, ParseError, ValidationError


class ChatMessageFrame(BaseModel):
    """``{"type": "message", "channelId": int, "userName": str, "text": str}``"""

    # strict: true is not an int, 1 is not a str
    model_config = ConfigDict(strict=True)

    type: Literal["message"]
    channel_id: int = Field(alias="channelId")
    user_name: str = Field(alias="userName")
    text: str


@dataclass(frozen=True)
class ParsedFrame:
    payload: dict[str, Any]  # decoded JSON object, relayed as-is
    frame: ChatMessageFrame


@dataclass(frozen=True)
class FrameRejection:
    error: ChatError

    @property
    def message(self) -> str:
        return self.error.message


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _parse_finite_float(literal: str) -> float:
    value = float(literal)
    if not math.isfinite(value):
        raise ValueError(f"number {literal} is out of range")
    return value


def parse_frame(raw: str | bytes) -> ParsedFrame | FrameRejection:
    """Decode and validate one frame. Binary frames must hold UTF-8 JSON."""
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError:
            return FrameRejection(ParseError("Invalid JSON: frame is not valid UTF-8"))

    try:
        # NaN, Infinity and overflowing numbers are not JSON
        payload = json.loads(
            raw, parse_constant=_reject_constant, parse_float=_parse_finite_float
        )
    except json.JSONDecodeError as exc:
        return FrameRejection(ParseError(f"Invalid JSON: {exc.msg}"))
    except ValueError as exc:
        return FrameRejection(ParseError(f"Invalid JSON: {exc}"))

    try:
        frame = ChatMessageFrame.model_validate(payload)
    except PydanticValidationError:
        return FrameRejection(ValidationError("Invalid message format"))

    # Empty check only, whitespace is a valid name/text
    if len(frame.user_name) < 1:
        return FrameRejection(
            ValidationError("Message userName must be longer than 0 character")
        )
    if len(frame.text) < 1:
        return FrameRejection(ValidationError("Message text must be longer than 0 character"))

    return ParsedFrame(payload=payload, frame=frame)


def error_frame(message: str) -> dict[str, str]:
    """Build the sender-only error frame."""
    return {"type": "error", "message": message}
