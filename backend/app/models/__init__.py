from backend.app.models.channel import Channel
from backend.app.models.message import Message

__all__ = ["Channel", "Message"]
