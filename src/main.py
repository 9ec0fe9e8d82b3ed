"""Halal AI Chat API: FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.auth.routes import router as auth_router
from src.chat.routes import router as chat_router
from src.config.cors import SecurityHeadersMiddleware, configure_cors
from src.config.logger import configure_logging
from src.config.settings import get_settings
from src.contact.routes import router as contact_router
from src.credits.routes import router as credits_router
from src.db.client import get_supabase
from src.files.routes import files_router, folders_router, shared_router
from src.health.routes import router as health_router
from src.health.service import HealthChecker
from src.middleware.error_handler import register_error_handlers
from src.middleware.rate_limiter import RateLimiterMiddleware
from src.middleware.request_id import RequestIDMiddleware
from src.notifications.routes import router as notifications_router

configure_logging(get_settings().LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Checking database schema...")
    try:
        report = HealthChecker(get_supabase()).check()
    except Exception:
        logger.warning("Schema check could not complete", exc_info=True)
    else:
        if not report.database_ok:
            logger.warning("Database unreachable at start-up")
        elif report.schema_issues:
            logger.warning("Database schema is missing %d column(s); some features may fail", len(report.schema_issues))
        else:
            logger.info("Database schema OK")
    yield


app = FastAPI(
    title="Halal AI Chat API",
    description=(
        "Credit-metered AI content generation with a personal file library.\n\n"
        "## Features\n"
        "- Username/password accounts with server-side sessions\n"
        "- Prompt screening against a content policy\n"
        "- Multi-provider generation (Groq, then Google AI, then a local template)\n"
        "- Files and folders with search, favorites and share links\n"
        "- Referral codes with credit bonuses and notifications\n"
        "- Per-session rate limiting (standard + AI tiers)\n\n"
        "## Authentication\n"
        "Login sets an HTTP-only session cookie. Non-browser clients may send the same "
        "token as `Authorization: Bearer <token>`."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Health", "description": "Liveness and database health"},
        {"name": "Auth", "description": "Register, login, logout, current user"},
        {"name": "Chat", "description": "Content generation and chat history"},
        {"name": "Files", "description": "Files, search, favorites and sharing"},
        {"name": "Folders", "description": "Folder tree"},
        {"name": "Credits", "description": "Referral credits"},
        {"name": "Notifications", "description": "User notifications"},
        {"name": "Contact", "description": "Public contact form"},
    ],
)

# --- Middleware (order matters: outermost first) ---
app.add_middleware(RequestIDMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
configure_cors(app)
app.add_middleware(RateLimiterMiddleware)

# --- Error handlers ---
register_error_handlers(app)

# --- Routes ---
app.include_router(auth_router)
app.include_router(credits_router)
app.include_router(chat_router)
app.include_router(files_router)
app.include_router(folders_router)
app.include_router(shared_router)
app.include_router(notifications_router)
app.include_router(contact_router)
app.include_router(health_router)


@app.get("/health", tags=["Health"], summary="Liveness check", description="Returns OK if the service is running.")
async def health_check():
    return {"status": "ok"}
