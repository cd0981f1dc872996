from pydantic import Field, field_validator

from guildhall.schemas.base import CamelModel, required_text


class MessageCreate(CamelModel):
    author_id: str = Field(..., min_length=1)
    author_name: str = Field(..., min_length=1)
    author_avatar_url: str | None = None
    content: str
    server_id: str = Field(..., min_length=1)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        return required_text(v, "content")


class MessageDelete(CamelModel):
    author_id: str = Field(..., min_length=1)
    server_id: str = Field(..., min_length=1)


class MessageResponse(CamelModel):
    id: str
    channel_id: str
    author_id: str
    author_name: str
    author_avatar_url: str | None = None
    content: str
    created_at: str | None = None


class ActionResult(CamelModel):
    success: bool = True
    message: str
