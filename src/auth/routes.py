"""Auth endpoints: register, login, logout, current user."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request, Response

from src.auth import repository, service
from src.auth.dependencies import CurrentUser, extract_session_token, get_current_user
from src.auth.schemas import LoginRequest, RegisterRequest
from src.config.settings import get_settings
from src.utils.errors import AuthenticationRequired

router = APIRouter(prefix="/api", tags=["Auth"])


def _set_session_cookie(response: Response, token: str, expires_at: datetime) -> None:
    settings = get_settings()
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=int((expires_at - datetime.now(timezone.utc)).total_seconds()),
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
    )


@router.post("/register", status_code=201, summary="Register a new user", description="Create an account, optionally with a referral code, and start a session.")
async def register(body: RegisterRequest, response: Response):
    user = service.register(body.username, body.password, body.referrer)
    token, expires_at = service.start_session(user["id"])
    _set_session_cookie(response, token, expires_at)
    return {"status": "success", "data": service.public_user(user)}


@router.post("/login", summary="Login", description="Authenticate with username and password and start a session.")
async def login(body: LoginRequest, response: Response):
    user = service.authenticate(body.username, body.password)
    token, expires_at = service.start_session(user["id"])
    _set_session_cookie(response, token, expires_at)
    return {"status": "success", "data": service.public_user(user)}


@router.post("/logout", summary="Logout", description="Revoke the current session and clear the session cookie.")
async def logout(request: Request, response: Response):
    token = extract_session_token(request)
    if token:
        service.end_session(token)
    response.delete_cookie(get_settings().SESSION_COOKIE_NAME)
    return {"status": "success", "data": {"message": "Logged out successfully"}}


@router.get("/user", summary="Current user", description="Return the authenticated user, including the current credit balance.")
async def current_user(user: CurrentUser = Depends(get_current_user)):
    row = repository.get_user_by_id(user.id)
    if not row:
        raise AuthenticationRequired()
    return {"status": "success", "data": service.public_user(row)}
