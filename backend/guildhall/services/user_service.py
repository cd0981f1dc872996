import logging

from guildhall.core.errors import NotFoundError
from guildhall.store import SERVER_TIMESTAMP, DocumentStore, check_document_id, join_path

logger = logging.getLogger(__name__)

USERS = "users"


def _public_user(doc: dict) -> dict:
    return {
        "id": doc["id"],
        "username": doc.get("username") or "",
        "profilePhotoUrl": doc.get("profilePhotoUrl") or None,
        "createdAt": doc.get("createdAt"),
    }


def upsert_user(
    store: DocumentStore,
    user_id: str,
    username: str,
    profile_photo_url: str | None = None,
) -> dict:
    """Create the user or overwrite its profile fields. createdAt is only
    ever set on first write."""
    path = join_path(USERS, check_document_id(user_id, "userId"))

    if store.get(USERS, user_id) is not None:
        store.update(path, {"username": username, "profilePhotoUrl": profile_photo_url})
    else:
        store.set(
            path,
            {
                "id": user_id,
                "username": username,
                "profilePhotoUrl": profile_photo_url,
                "createdAt": SERVER_TIMESTAMP,
            },
        )
        logger.info("USER_CREATED | id=%s", user_id)

    return _public_user(store.get(USERS, user_id))


def get_user(store: DocumentStore, user_id: str) -> dict:
    doc = store.get(USERS, user_id)
    if doc is None:
        raise NotFoundError("User not found")
    return _public_user(doc)


def get_users(store: DocumentStore, user_ids: list[str]) -> list[dict]:
    """Existing users among ``user_ids``, in the given order. Unknown ids are
    skipped."""
    users = []
    for user_id in user_ids:
        doc = store.get(USERS, user_id)
        if doc is not None:
            users.append(_public_user(doc))
    return users
