from guildhall.store import SERVER_TIMESTAMP, DocumentStore, join_path

CHANNELS = "channels"

CHANNEL_TYPE_TEXT = "text"


def _public_channel(doc: dict) -> dict:
    return {
        "id": doc["id"],
        "serverId": doc.get("serverId"),
        "name": doc.get("name"),
        "type": doc.get("type", CHANNEL_TYPE_TEXT),
        "createdAt": doc.get("createdAt"),
    }


def get_channels(store: DocumentStore, server_id: str) -> list[dict]:
    """Channels of a server, oldest first."""
    docs = store.query(CHANNELS, "serverId", "==", server_id, order_by="createdAt")
    return [_public_channel(d) for d in docs]


def create_channel(store: DocumentStore, server_id: str, name: str) -> dict:
    channel_id = store.create(CHANNELS)
    store.set(
        join_path(CHANNELS, channel_id),
        {
            "id": channel_id,
            "serverId": server_id,
            "name": name,
            "type": CHANNEL_TYPE_TEXT,
            "createdAt": SERVER_TIMESTAMP,
        },
    )
    return _public_channel(store.get(CHANNELS, channel_id))
