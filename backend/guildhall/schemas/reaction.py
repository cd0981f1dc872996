from pydantic import BaseModel, Field, field_validator

from guildhall.schemas.base import CamelModel, required_text


class ReactionBody(CamelModel):
    user_id: str = Field(..., min_length=1)
    emoji: str = Field(..., max_length=50)

    @field_validator("emoji")
    @classmethod
    def emoji_not_blank(cls, v: str) -> str:
        return required_text(v, "emoji")


class ReactionSummary(BaseModel):
    count: int
    users: list[str]
