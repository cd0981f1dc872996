from pydantic import Field, field_validator

from guildhall.schemas.base import CamelModel, required_text


class ChannelCreate(CamelModel):
    name: str
    user_id: str = Field(..., min_length=1)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        return required_text(v, "name")


class ChannelResponse(CamelModel):
    id: str
    server_id: str
    name: str
    type: str = "text"
    created_at: str | None = None
