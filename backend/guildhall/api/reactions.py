from fastapi import APIRouter, Body, Depends

from guildhall.schemas.message import ActionResult
from guildhall.schemas.reaction import ReactionBody, ReactionSummary
from guildhall.services import reaction_service
from guildhall.store import DocumentStore, get_store

router = APIRouter(prefix="/messages/{message_id}/reactions", tags=["reactions"])


@router.get("", response_model=dict[str, ReactionSummary])
async def get_reactions(message_id: str, store: DocumentStore = Depends(get_store)) -> dict:
    return reaction_service.get_reactions(store, message_id)


@router.post("", response_model=ActionResult, status_code=201)
async def add_reaction(
    message_id: str,
    reaction_in: ReactionBody,
    store: DocumentStore = Depends(get_store),
) -> dict:
    """React with an emoji. Reacting twice with the same emoji keeps one reaction."""
    reaction_service.add_reaction(store, message_id, reaction_in.user_id, reaction_in.emoji)
    return {"success": True, "message": "Reaction added successfully"}


@router.delete("", response_model=ActionResult)
async def remove_reaction(
    message_id: str,
    reaction_in: ReactionBody = Body(...),
    store: DocumentStore = Depends(get_store),
) -> dict:
    reaction_service.remove_reaction(store, message_id, reaction_in.user_id, reaction_in.emoji)
    return {"success": True, "message": "Reaction removed successfully"}
