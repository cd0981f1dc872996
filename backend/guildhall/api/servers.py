import logging

from fastapi import APIRouter, Depends, Query

from guildhall.api.deps import get_current_user_id
from guildhall.core.errors import BadRequestError, ForbiddenError, NotFoundError
from guildhall.schemas.server import (
    InviteCreate,
    InviteResponse,
    JoinResponse,
    JoinServer,
    ServerCreate,
    ServerList,
    ServerLogs,
    ServerResponse,
)
from guildhall.services import server_service
from guildhall.services.server_service import (
    LOG_ACTION_CREATED,
    LOG_ACTION_INVITED,
    LOG_ACTION_JOINED,
    LOG_TYPE_INVITATION,
    LOG_TYPE_SERVER,
)
from guildhall.store import DocumentStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/servers", tags=["servers"])

# Accepted spellings of ?orderBy=, case-insensitive
_ORDER_BY_PARAMS = {"createdat": "createdAt", "name": "name"}


def _parse_limit(raw: str | None) -> int | None:
    """Anything that is not a positive integer means no limit."""
    try:
        value = int(raw) if raw is not None else 0
    except ValueError:
        return None
    return value if value > 0 else None


@router.get("", response_model=ServerList)
async def list_servers(
    user_id: str | None = Query(None, alias="userId"),
    order_by: str | None = Query(None, alias="orderBy"),
    descending: str | None = Query(None),
    store: DocumentStore = Depends(get_store),
) -> dict:
    """Servers the user is a member of, optionally sorted by createdAt or name."""
    if not user_id:
        raise BadRequestError("userId is required", label="userId is required")

    field = _ORDER_BY_PARAMS.get(order_by.lower()) if order_by else None
    if field is None:
        return {
            "user_id": user_id,
            "order_by": order_by,
            "descending": None,
            "servers": server_service.get_servers(store, user_id),
        }

    is_descending = descending is not None and descending.lower() == "true"
    return {
        "user_id": user_id,
        "order_by": order_by,
        "descending": is_descending,
        "servers": server_service.get_servers_order_by(store, user_id, field, is_descending),
    }


@router.post("", response_model=ServerResponse, status_code=201)
async def create_server(
    server_in: ServerCreate,
    store: DocumentStore = Depends(get_store),
) -> dict:
    """Create a server. The owner becomes its first member."""
    server = server_service.create_server(
        store,
        name=server_in.name,
        owner_id=server_in.owner_id,
        image_url=server_in.image_url,
        member_ids=server_in.member_ids,
    )
    server_service.add_server_log(
        store,
        server["id"],
        type=LOG_TYPE_SERVER,
        action=LOG_ACTION_CREATED,
        user_id=server_in.owner_id,
        metadata={"serverName": server_in.name},
    )
    return server


@router.post("/join", response_model=JoinResponse)
async def join_server(
    join_in: JoinServer,
    store: DocumentStore = Depends(get_store),
) -> dict:
    """Redeem an invite hash. Joining twice is harmless."""
    server = server_service.get_server(store, join_in.server_id)

    if not server_service.verify_invite_hash(join_in.hash, server["ownerId"], join_in.server_id):
        raise ForbiddenError("Invalid invitation hash")

    server_service.add_member_to_server(store, join_in.server_id, join_in.user_id)
    server_service.add_server_log(
        store,
        join_in.server_id,
        type=LOG_TYPE_INVITATION,
        action=LOG_ACTION_JOINED,
        user_id=join_in.user_id,
        metadata={"inviterId": join_in.inviter_id},
    )
    return {"server_id": join_in.server_id, "inviter_id": join_in.inviter_id}


@router.post("/{server_id}/invite", response_model=InviteResponse)
async def create_invite(
    server_id: str,
    invite_in: InviteCreate,
    current_user_id: str = Depends(get_current_user_id),
    store: DocumentStore = Depends(get_store),
) -> dict:
    """
    Build an invite for this server on behalf of ``inviterId``.
    Non-members get the same 404 as for an unknown server.
    """
    server = server_service.get_server(store, server_id)
    if invite_in.inviter_id not in server["memberIds"]:
        raise NotFoundError("Server not found")

    invite_hash = server_service.generate_invite_hash(server["ownerId"], server_id)
    server_service.add_server_log(
        store,
        server_id,
        type=LOG_TYPE_INVITATION,
        action=LOG_ACTION_INVITED,
        user_id=invite_in.inviter_id,
        metadata={"hash": invite_hash},
    )
    logger.info("INVITE_CREATED | server=%s inviter=%s requested_by=%s", server_id, invite_in.inviter_id, current_user_id)
    return {
        "hash": invite_hash,
        "server_id": server_id,
        "inviter_id": invite_in.inviter_id,
        "invite_link": server_service.build_invite_link(invite_hash, server_id, invite_in.inviter_id),
    }


@router.get("/{server_id}/logs", response_model=ServerLogs)
async def get_server_logs(
    server_id: str,
    type: str | None = Query(None),
    user_id: str | None = Query(None, alias="userId"),
    limit: str | None = Query(None),
    store: DocumentStore = Depends(get_store),
) -> dict:
    logs = server_service.get_server_logs(store, server_id, type=type, user_id=user_id, limit=_parse_limit(limit))
    return {"server_id": server_id, "count": len(logs), "logs": logs}
