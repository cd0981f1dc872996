from fastapi import APIRouter, Body, Depends

from guildhall.schemas.message import ActionResult, MessageCreate, MessageDelete, MessageResponse
from guildhall.services import message_service, server_service
from guildhall.services.server_service import LOG_ACTION_CREATED, LOG_ACTION_DELETED, LOG_TYPE_MESSAGE
from guildhall.store import DocumentStore, get_store

router = APIRouter(prefix="/channels/{channel_id}/messages", tags=["messages"])


@router.get("", response_model=list[MessageResponse])
async def list_messages(channel_id: str, store: DocumentStore = Depends(get_store)) -> list[dict]:
    """Full channel history, oldest first."""
    return message_service.get_messages(store, channel_id)


@router.post("", response_model=MessageResponse, status_code=201)
async def create_message(
    channel_id: str,
    message_in: MessageCreate,
    store: DocumentStore = Depends(get_store),
) -> dict:
    server_service.get_server(store, message_in.server_id)

    message = message_service.create_message(
        store,
        channel_id,
        author_id=message_in.author_id,
        author_name=message_in.author_name,
        content=message_in.content,
        author_avatar_url=message_in.author_avatar_url,
    )
    server_service.add_server_log(
        store,
        message_in.server_id,
        type=LOG_TYPE_MESSAGE,
        action=LOG_ACTION_CREATED,
        user_id=message_in.author_id,
        target_id=message["id"],
        metadata={"channelId": channel_id},
    )
    return message


@router.delete("/{message_id}", response_model=ActionResult)
async def delete_message(
    channel_id: str,
    message_id: str,
    message_in: MessageDelete = Body(...),
    store: DocumentStore = Depends(get_store),
) -> dict:
    """Delete one of your own messages."""
    server_service.get_server(store, message_in.server_id)

    message_service.delete_message(store, channel_id, message_id, message_in.author_id)
    server_service.add_server_log(
        store,
        message_in.server_id,
        type=LOG_TYPE_MESSAGE,
        action=LOG_ACTION_DELETED,
        user_id=message_in.author_id,
        target_id=message_id,
        metadata={"channelId": channel_id},
    )
    return {"success": True, "message": "Message deleted successfully"}
