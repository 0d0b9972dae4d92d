"""Domain errors raised by the channel registry and the message relay.

Each error carries a human-readable message that is surfaced unchanged to
the client: as an HTTP ``detail`` or as an ``{"type": "error"}`` frame.
"""


class ChatError(Exception):
    """Base class for user-correctable chat errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ChatError):
    """Bad, missing or duplicate channel name, or an incomplete message payload."""


class NotFoundError(ChatError):
    """Unknown channel id."""


class ParseError(ChatError):
    """Inbound frame is not valid JSON."""
