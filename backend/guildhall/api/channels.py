from fastapi import APIRouter, Depends

from guildhall.schemas.channel import ChannelCreate, ChannelResponse
from guildhall.services import channel_service, server_service
from guildhall.services.server_service import LOG_ACTION_CREATED, LOG_TYPE_CHANNEL
from guildhall.store import DocumentStore, get_store

router = APIRouter(tags=["channels"])


@router.get("/servers/{server_id}/channels", response_model=list[ChannelResponse])
async def list_channels(server_id: str, store: DocumentStore = Depends(get_store)) -> list[dict]:
    return channel_service.get_channels(store, server_id)


@router.post(
    "/servers/{server_id}/channels",
    response_model=ChannelResponse,
    status_code=201,
)
async def create_channel(
    server_id: str,
    channel_in: ChannelCreate,
    store: DocumentStore = Depends(get_store),
) -> dict:
    """Create a text channel and record it in the server log."""
    # Unknown server: 404 before anything is written
    server_service.get_server(store, server_id)

    channel = channel_service.create_channel(store, server_id, channel_in.name)
    server_service.add_server_log(
        store,
        server_id,
        type=LOG_TYPE_CHANNEL,
        action=LOG_ACTION_CREATED,
        user_id=channel_in.user_id,
        target_id=channel["id"],
        metadata={"channelName": channel_in.name},
    )
    return channel
