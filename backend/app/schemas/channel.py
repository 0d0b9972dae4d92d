from pydantic import BaseModel, ConfigDict, Field

from backend.app.models.channel import Channel


class MessageResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_name: str = Field(alias="userName")
    text: str


class ChannelResponse(BaseModel):
    id: int
    name: str
    messages: list[MessageResponse]

    @classmethod
    def from_channel(cls, channel: Channel) -> "ChannelResponse":
        return cls(
            id=channel.id,
            name=channel.name,
            messages=[
                MessageResponse(user_name=msg.user_name, text=msg.text)
                for msg in channel.messages
            ],
        )
