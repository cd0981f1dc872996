from pydantic import Field, field_validator

from guildhall.schemas.base import CamelModel, required_text


class UserUpsert(CamelModel):
    user_id: str = Field(..., min_length=1)
    username: str
    profile_photo_url: str | None = None

    @field_validator("username")
    @classmethod
    def username_not_blank(cls, v: str) -> str:
        return required_text(v, "username")


class UserResponse(CamelModel):
    id: str
    username: str
    profile_photo_url: str | None = None
    created_at: str | None = None
