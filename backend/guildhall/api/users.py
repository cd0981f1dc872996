from fastapi import APIRouter, Depends

from guildhall.schemas.user import UserResponse, UserUpsert
from guildhall.services import user_service
from guildhall.store import DocumentStore, get_store

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserResponse)
async def upsert_user(
    user_in: UserUpsert,
    store: DocumentStore = Depends(get_store),
) -> dict:
    """Create the profile on first sign-in, refresh it afterwards."""
    return user_service.upsert_user(
        store,
        user_in.user_id,
        user_in.username,
        profile_photo_url=user_in.profile_photo_url,
    )


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, store: DocumentStore = Depends(get_store)) -> dict:
    return user_service.get_user(store, user_id)
