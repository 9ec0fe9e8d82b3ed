"""Chat endpoints: generate, history, favorites."""

from uuid import UUID

from fastapi import APIRouter, Depends

from src.auth.dependencies import CurrentUser, get_current_user
from src.chat import service
from src.chat.schemas import ChatRequest, FavoriteRequest

router = APIRouter(prefix="/api/chat", tags=["Chat"])


@router.post("", summary="Generate content", description="Screen the prompt, charge one credit and return generated text.")
async def chat(body: ChatRequest, user: CurrentUser = Depends(get_current_user)):
    outcome = await service.run_chat(user.id, body)
    return {
        "status": "success",
        "data": {
            "response": outcome.response,
            "credits_remaining": outcome.credits_remaining,
            "history_id": outcome.entry_id,
        },
    }


@router.get("/history", summary="Chat history", description="All prompt/response pairs for the user, newest first.")
async def history(user: CurrentUser = Depends(get_current_user)):
    return {"status": "success", "data": service.list_history(user.id)}


@router.get("/favorites", summary="Favorite chats")
async def favorites(user: CurrentUser = Depends(get_current_user)):
    return {"status": "success", "data": service.list_favorites(user.id)}


@router.post("/{entry_id}/favorite", summary="Set favorite flag on a chat entry")
async def favorite(entry_id: UUID, body: FavoriteRequest, user: CurrentUser = Depends(get_current_user)):
    entry = service.set_favorite(str(entry_id), user.id, body.is_favorite)
    return {"status": "success", "data": entry}
