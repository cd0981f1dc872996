from typing import Any

from pydantic import Field, field_validator

from guildhall.schemas.base import CamelModel, required_text


class ServerCreate(CamelModel):
    name: str
    owner_id: str = Field(..., min_length=1)
    image_url: str | None = None
    member_ids: list[str] | None = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        return required_text(v, "name")

    @field_validator("member_ids", mode="before")
    @classmethod
    def ignore_non_list_members(cls, v: Any) -> Any:
        # Anything but an array falls back to "owner only"
        return v if isinstance(v, list) else None


class ServerResponse(CamelModel):
    id: str
    name: str
    owner_id: str
    member_ids: list[str]
    image_url: str | None = None
    created_at: str | None = None


class ServerSummary(CamelModel):
    """What a member sees in their server list."""

    id: str
    owner_id: str
    name: str
    image_url: str | None = None


class ServerList(CamelModel):
    user_id: str
    order_by: str | None = None
    descending: bool | None = None
    servers: list[ServerSummary]


class InviteCreate(CamelModel):
    inviter_id: str = Field(..., min_length=1)


class InviteResponse(CamelModel):
    hash: str
    server_id: str
    inviter_id: str
    invite_link: str


class JoinServer(CamelModel):
    user_id: str = Field(..., min_length=1)
    server_id: str = Field(..., min_length=1)
    hash: str = Field(..., min_length=1)
    inviter_id: str | None = None


class JoinResponse(CamelModel):
    success: bool = True
    message: str = "Successfully joined server"
    server_id: str
    inviter_id: str | None = None


class LogEntry(CamelModel):
    id: str
    type: str
    action: str
    user_id: str
    target_id: str | None = None
    metadata: dict[str, Any] | None = None
    timestamp: str | None = None


class ServerLogs(CamelModel):
    server_id: str
    count: int
    logs: list[LogEntry]
