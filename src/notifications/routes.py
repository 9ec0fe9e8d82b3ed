"""Notification endpoints."""

from fastapi import APIRouter, Depends

from src.auth.dependencies import CurrentUser, get_current_user
from src.notifications import repository

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


@router.get("", summary="List notifications", description="The caller's notifications, newest first.")
async def list_notifications(user: CurrentUser = Depends(get_current_user)):
    return {"status": "success", "data": repository.list_by_user(user.id)}


@router.post("/mark-read", summary="Mark all notifications read")
async def mark_read(user: CurrentUser = Depends(get_current_user)):
    updated = repository.mark_all_read(user.id)
    return {"status": "success", "data": {"updated": updated}}
