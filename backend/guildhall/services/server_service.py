"""
Servers (communities), their membership list, invite hashes and audit log.

Membership is the ``memberIds`` array on the server document and the audit
log is the append-only ``logs`` array on the same document. Both are changed
with read-then-write or array-union updates and are not protected against
concurrent requests.
"""

import hashlib
import hmac
import logging
import uuid

from guildhall.config import settings
from guildhall.core.errors import NotFoundError
from guildhall.store import SERVER_TIMESTAMP, ArrayUnion, DocumentStore, join_path

logger = logging.getLogger(__name__)

SERVERS = "servers"

ORDERABLE_FIELDS = ("createdAt", "name")

LOG_TYPE_SERVER = "server"
LOG_TYPE_CHANNEL = "channel"
LOG_TYPE_MESSAGE = "message"
LOG_TYPE_INVITATION = "invitation"
LOG_TYPES = (LOG_TYPE_SERVER, LOG_TYPE_CHANNEL, LOG_TYPE_MESSAGE, LOG_TYPE_INVITATION)

LOG_ACTION_CREATED = "created"
LOG_ACTION_DELETED = "deleted"
LOG_ACTION_UPDATED = "updated"
LOG_ACTION_JOINED = "joined"
LOG_ACTION_INVITED = "invited"
LOG_ACTIONS = (LOG_ACTION_CREATED, LOG_ACTION_DELETED, LOG_ACTION_UPDATED, LOG_ACTION_JOINED, LOG_ACTION_INVITED)


def _public_server(doc: dict) -> dict:
    """Reduced shape for listings; memberIds and logs stay private."""
    return {
        "id": doc["id"],
        "ownerId": doc.get("ownerId"),
        "name": doc.get("name"),
        "imageUrl": doc.get("imageUrl"),
    }


def _server_record(doc: dict) -> dict:
    return {
        "id": doc["id"],
        "name": doc.get("name"),
        "ownerId": doc.get("ownerId"),
        "memberIds": list(doc.get("memberIds") or []),
        "imageUrl": doc.get("imageUrl"),
        "createdAt": doc.get("createdAt"),
    }


# ── Servers ───────────────────────────────────────────────────────────────────


def create_server(
    store: DocumentStore,
    name: str,
    owner_id: str,
    image_url: str | None = None,
    member_ids: list[str] | None = None,
) -> dict:
    """Create a server. The owner is always the first member and every
    member appears once."""
    member_ids = list(dict.fromkeys([owner_id, *(member_ids or [])]))

    server_id = store.create(SERVERS)
    store.set(
        join_path(SERVERS, server_id),
        {
            "id": server_id,
            "name": name,
            "ownerId": owner_id,
            "memberIds": member_ids,
            "imageUrl": image_url,
            "createdAt": SERVER_TIMESTAMP,
        },
    )
    logger.info("SERVER_CREATED | id=%s owner=%s members=%d", server_id, owner_id, len(member_ids))
    return _server_record(store.get(SERVERS, server_id))


def get_server(store: DocumentStore, server_id: str) -> dict:
    doc = store.get(SERVERS, server_id)
    if doc is None:
        raise NotFoundError("Server not found")
    return _server_record(doc)


def get_servers(store: DocumentStore, user_id: str) -> list[dict]:
    """Servers ``user_id`` is a member of."""
    docs = store.query(SERVERS, "memberIds", "array-contains", user_id)
    return [_public_server(d) for d in docs]


def get_servers_order_by(
    store: DocumentStore,
    user_id: str,
    order_by: str,
    descending: bool = False,
) -> list[dict]:
    if order_by not in ORDERABLE_FIELDS:
        raise ValueError(f"Servers cannot be ordered by {order_by!r}")
    docs = store.query(
        SERVERS,
        "memberIds",
        "array-contains",
        user_id,
        order_by=order_by,
        descending=descending,
    )
    return [_public_server(d) for d in docs]


def add_member_to_server(store: DocumentStore, server_id: str, user_id: str) -> None:
    """Add ``user_id`` to the server's members. Already a member: no-op."""
    server = get_server(store, server_id)
    members = server["memberIds"]
    if user_id in members:
        return

    # Whole-array write: a concurrent add between the read and this write
    # is lost.
    store.update(join_path(SERVERS, server_id), {"memberIds": [*members, user_id]})
    logger.info("MEMBER_ADDED | server=%s user=%s", server_id, user_id)


# ── Invites ───────────────────────────────────────────────────────────────────


def generate_invite_hash(owner_id: str, server_id: str) -> str:
    """SHA-256 hex digest of ownerId + serverId.

    Anyone who knows both ids can compute it; there is no secret or expiry.
    """
    return hashlib.sha256(f"{owner_id}{server_id}".encode()).hexdigest()


def verify_invite_hash(invite_hash: str, owner_id: str, server_id: str) -> bool:
    expected = generate_invite_hash(owner_id, server_id)
    return hmac.compare_digest(invite_hash.encode(), expected.encode())


def build_invite_link(invite_hash: str, server_id: str, inviter_id: str) -> str:
    return f"{settings.INVITE_LINK_BASE}{invite_hash}{server_id}{inviter_id}"


# ── Audit log ─────────────────────────────────────────────────────────────────


def add_server_log(
    store: DocumentStore,
    server_id: str,
    type: str,
    action: str,
    user_id: str,
    target_id: str | None = None,
    metadata: dict | None = None,
) -> None:
    """Append an entry to the server's audit log. Entries are never changed
    or removed afterwards."""
    if type not in LOG_TYPES:
        raise ValueError(f"Unknown log type: {type!r}")
    if action not in LOG_ACTIONS:
        raise ValueError(f"Unknown log action: {action!r}")

    entry = {"id": uuid.uuid4().hex, "type": type, "action": action, "userId": user_id}
    if target_id is not None:
        entry["targetId"] = target_id
    if metadata is not None:
        entry["metadata"] = metadata
    entry["timestamp"] = SERVER_TIMESTAMP

    try:
        store.update(join_path(SERVERS, server_id), {"logs": ArrayUnion(entry)})
    except NotFoundError:
        raise NotFoundError("Server not found") from None

    logger.info("SERVER_LOG | server=%s type=%s action=%s user=%s", server_id, type, action, user_id)


def get_server_logs(
    store: DocumentStore,
    server_id: str,
    type: str | None = None,
    user_id: str | None = None,
    limit: int | None = None,
) -> list[dict]:
    """Log entries, newest first, optionally filtered by type and/or user
    and cut to ``limit``."""
    doc = store.get(SERVERS, server_id)
    if doc is None:
        raise NotFoundError("Server not found")

    logs = list(doc.get("logs") or [])
    if type:
        logs = [entry for entry in logs if entry.get("type") == type]
    if user_id:
        logs = [entry for entry in logs if entry.get("userId") == user_id]

    # Entries sharing a timestamp come back latest-appended first.
    ordered = sorted(enumerate(logs), key=lambda pair: (pair[1].get("timestamp") or "", pair[0]), reverse=True)
    logs = [entry for _, entry in ordered]

    if limit and limit > 0:
        logs = logs[:limit]
    return logs
