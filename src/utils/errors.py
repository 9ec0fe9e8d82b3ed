"""Application errors. Each maps to one status code and a stable error type."""

from fastapi import HTTPException


class AppError(HTTPException):
    status_code = 500
    error_type = "internal_error"
    default_detail = "An unexpected error occurred"

    def __init__(self, detail: str | None = None):
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail)


class AuthenticationRequired(AppError):
    status_code = 401
    error_type = "authentication_error"
    default_detail = "Authentication required"


class InvalidCredentials(AppError):
    status_code = 401
    error_type = "authentication_error"
    default_detail = "Invalid username or password"


class NotFound(AppError):
    status_code = 404
    error_type = "not_found"
    default_detail = "Not found"


class DuplicateUsername(AppError):
    status_code = 400
    error_type = "duplicate_username"
    default_detail = "Username already exists"


class ModerationRejected(AppError):
    status_code = 400
    error_type = "moderation_rejected"
    default_detail = "This request is not permitted"


class FolderNotEmpty(AppError):
    status_code = 400
    error_type = "folder_not_empty"
    default_detail = "Cannot delete folder with files. Move or delete the files first."


class InsufficientCredits(AppError):
    status_code = 402
    error_type = "insufficient_credits"
    default_detail = "Insufficient credits"


class LedgerError(AppError):
    """A credit adjustment could not be completed and was rolled back."""

    status_code = 503
    error_type = "upstream_unavailable"
    default_detail = "Credits could not be updated. Please try again later."
