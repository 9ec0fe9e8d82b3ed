"""Credit endpoints."""

from fastapi import APIRouter, Depends

from src.auth.dependencies import CurrentUser, get_current_user
from src.credits import ledger

router = APIRouter(prefix="/api/user", tags=["Credits"])


@router.get("/referral-credits", summary="Referral count", description="Number of users who registered with the caller's referral code.")
async def referral_credits(user: CurrentUser = Depends(get_current_user)):
    return {"status": "success", "data": {"count": ledger.referral_count(user.id)}}
