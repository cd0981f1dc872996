import logging

from guildhall.core.errors import ForbiddenError, NotFoundError
from guildhall.services.channel_service import CHANNELS
from guildhall.store import SERVER_TIMESTAMP, DocumentStore, join_path

logger = logging.getLogger(__name__)


def _messages(channel_id: str) -> str:
    return join_path(CHANNELS, channel_id, "messages")


def _public_message(doc: dict) -> dict:
    return {
        "id": doc["id"],
        "channelId": doc.get("channelId"),
        "authorId": doc.get("authorId"),
        "authorName": doc.get("authorName"),
        "authorAvatarUrl": doc.get("authorAvatarUrl"),
        "content": doc.get("content"),
        "createdAt": doc.get("createdAt"),
    }


def get_messages(store: DocumentStore, channel_id: str) -> list[dict]:
    """Messages of a channel, oldest first."""
    docs = store.list_collection(_messages(channel_id), order_by="createdAt")
    return [_public_message(d) for d in docs]


def create_message(
    store: DocumentStore,
    channel_id: str,
    author_id: str,
    author_name: str,
    content: str,
    author_avatar_url: str | None = None,
) -> dict:
    collection = _messages(channel_id)
    message_id = store.create(collection)
    store.set(
        join_path(collection, message_id),
        {
            "id": message_id,
            "channelId": channel_id,
            "authorId": author_id,
            "authorName": author_name,
            "authorAvatarUrl": author_avatar_url,
            "content": content,
            "createdAt": SERVER_TIMESTAMP,
        },
    )
    return _public_message(store.get(collection, message_id))


def delete_message(store: DocumentStore, channel_id: str, message_id: str, author_id: str) -> None:
    """Delete a message. Only its author may do so."""
    collection = _messages(channel_id)
    doc = store.get(collection, message_id)
    if doc is None:
        raise NotFoundError("Message not found")

    if doc.get("authorId") != author_id:
        logger.warning(
            "Rejected delete of message %s in channel %s by %s (author %s)",
            message_id,
            channel_id,
            author_id,
            doc.get("authorId"),
        )
        raise ForbiddenError("Unauthorized: You can only delete your own messages")

    store.delete(join_path(collection, message_id))
