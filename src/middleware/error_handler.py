"""Global exception handlers: map exceptions to structured JSON responses."""

import logging

import httpx
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from postgrest.exceptions import APIError
from starlette.responses import JSONResponse

from src.db.models import PG_UNDEFINED_COLUMN

logger = logging.getLogger(__name__)

RETRY_LATER = "The service is temporarily unavailable. Please try again later."


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


def _error_response(status: int, error_type: str, message: str, request_id: str, code: str | None = None) -> JSONResponse:
    error = {
        "type": error_type,
        "message": message,
        "request_id": request_id,
    }
    if code:
        error["code"] = code
    return JSONResponse(status_code=status, content={"status": "error", "error": error})


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        messages = "; ".join(
            f"{'.'.join(str(part) for part in e['loc'])}: {e['msg']}" for e in exc.errors()
        )
        return _error_response(400, "validation_error", messages, _request_id(request))

    @app.exception_handler(HTTPException)
    async def http_error(request: Request, exc: HTTPException):
        type_map = {
            400: "validation_error",
            401: "authentication_error",
            402: "insufficient_credits",
            403: "forbidden",
            404: "not_found",
            405: "method_not_allowed",
            429: "rate_limit",
        }
        error_type = getattr(exc, "error_type", None) or type_map.get(exc.status_code, "http_error")
        return _error_response(exc.status_code, error_type, str(exc.detail), _request_id(request))

    @app.exception_handler(APIError)
    async def database_error(request: Request, exc: APIError):
        code = "SCHEMA_ERROR" if exc.code == PG_UNDEFINED_COLUMN else "DB_ERROR"
        logger.error(
            "Database error on %s %s: code=%s message=%s",
            request.method, request.url.path, exc.code, exc.message,
        )
        return _error_response(503, "upstream_unavailable", RETRY_LATER, _request_id(request), code=code)

    @app.exception_handler(httpx.TransportError)
    async def transport_error(request: Request, exc: httpx.TransportError):
        logger.error("Upstream unreachable on %s %s: %s", request.method, request.url.path, exc)
        return _error_response(503, "upstream_unavailable", RETRY_LATER, _request_id(request), code="DB_CONNECTION")

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return _error_response(500, "internal_error", "An unexpected error occurred", _request_id(request), code="SERVER_ERROR")
