import hashlib
import json

from guildhall.store import SERVER_TIMESTAMP, DocumentStore, join_path

REACTIONS = "reactions"


def _items(message_id: str) -> str:
    return join_path(REACTIONS, message_id, "items")


def _reaction_path(message_id: str, user_id: str, emoji: str) -> str:
    # One document per (user, emoji): reacting twice rewrites the same record.
    # Hashing the encoded pair keeps ids distinct for any characters in either part.
    key = hashlib.sha256(json.dumps([user_id, emoji]).encode()).hexdigest()
    return join_path(_items(message_id), key)


def add_reaction(store: DocumentStore, message_id: str, user_id: str, emoji: str) -> None:
    store.set(
        _reaction_path(message_id, user_id, emoji),
        {
            "messageId": message_id,
            "userId": user_id,
            "emoji": emoji,
            "createdAt": SERVER_TIMESTAMP,
        },
    )


def remove_reaction(store: DocumentStore, message_id: str, user_id: str, emoji: str) -> None:
    store.delete(_reaction_path(message_id, user_id, emoji))


def get_reactions(store: DocumentStore, message_id: str) -> dict[str, dict]:
    """Reactions grouped by emoji: ``{emoji: {"count": n, "users": [ids]}}``."""
    summary: dict[str, dict] = {}
    for doc in store.list_collection(_items(message_id)):
        entry = summary.setdefault(doc["emoji"], {"count": 0, "users": []})
        entry["count"] += 1
        entry["users"].append(doc["userId"])
    return summary
