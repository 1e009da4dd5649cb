"""
selfserve_api.api.errors

Route-level errors and the JSON error envelope.

Responsibilities:
- Define errors raised by route handlers (validation, not found, database).
- Render `ApiError` and `auth.errors.AuthError` uniformly at the boundary.
"""

from __future__ import annotations

from typing import Any, ClassVar

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from selfserve_api.auth.errors import AuthError
from selfserve_api.observability.logging import get_logger
from selfserve_api.settings import Settings

log = get_logger(__name__)


class ApiError(Exception):
    kind: ClassVar[str] = "ApiError"
    status_code: ClassVar[int] = 500

    def __init__(self, message: str, *, details: list[dict[str, str]] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or []


class ValidationFailed(ApiError):
    kind = "ValidationError"
    status_code = 400


class NotFound(ApiError):
    kind = "NotFound"
    status_code = 404

    def __init__(self, resource: str) -> None:
        super().__init__(f"{resource} not found")


class DatabaseError(ApiError):
    kind = "DatabaseError"
    status_code = 500


def error_body(
    *, kind: str, message: str, details: list[dict[str, str]] | None = None
) -> dict[str, Any]:
    error: dict[str, Any] = {"kind": kind, "message": message}
    if details:
        error["details"] = details
    return {"error": error}


def register_error_handlers(app: FastAPI, settings: Settings) -> None:
    def _cause(exc: Exception, body: dict[str, Any]) -> dict[str, Any]:
        # Debug-only: class name of the underlying fault, never its message or stack.
        if settings.expose_error_details and exc.__cause__ is not None:
            body["error"]["cause"] = type(exc.__cause__).__name__
        return body

    @app.exception_handler(AuthError)
    async def _auth_error(_: Request, exc: AuthError) -> JSONResponse:
        message = exc.message
        if exc.status_code >= 500:
            log.error("auth_error", kind=exc.kind, exc_info=exc)
            # Infrastructure detail stays in the logs.
            message = exc.default_message
        return JSONResponse(
            status_code=exc.status_code,
            content=_cause(exc, error_body(kind=exc.kind, message=message)),
        )

    @app.exception_handler(ApiError)
    async def _api_error(_: Request, exc: ApiError) -> JSONResponse:
        if exc.status_code >= 500:
            log.error("api_error", kind=exc.kind, exc_info=exc)
        return JSONResponse(
            status_code=exc.status_code,
            content=_cause(
                exc, error_body(kind=exc.kind, message=exc.message, details=exc.details)
            ),
        )


# --- Module Notes -----------------------------------------------------------
# Guarded routes validate bodies through `auth.deps.Authorized.body_as`, so their
# schema errors render as 400 `ValidationError`. Unguarded routes keep FastAPI's 422.
