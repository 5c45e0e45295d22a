# ========================================
# teamup/utils/errors.py - ERROR TAXONOMY
# ========================================

from typing import Any, Dict

import structlog
from fastapi import FastAPI, HTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

logger = structlog.get_logger()


class TeamUpError(Exception):
    """Base error raised by the workflow services.

    `message` is shown to the caller as `detail`, `code` is stable for clients.
    """

    status_code = 500
    code = "internal.error"

    def __init__(self, message: str, code: str = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code

    def to_public_dict(self) -> Dict[str, Any]:
        return {"detail": self.message, "code": self.code}


class NotFoundError(TeamUpError):
    status_code = 404
    code = "resource.not_found"


class ForbiddenError(TeamUpError):
    status_code = 403
    code = "auth.forbidden"


class InvalidTransitionError(TeamUpError):
    status_code = 400
    code = "state.invalid_transition"


class QuotaExceededError(TeamUpError):
    status_code = 400
    code = "slot.quota_exceeded"


class DuplicateApplicationError(TeamUpError):
    status_code = 400
    code = "application.duplicate"


class ConflictError(TeamUpError):
    status_code = 409
    code = "resource.conflict"


class InternalError(TeamUpError):
    status_code = 500
    code = "internal.error"


def register_exception_handlers(app: FastAPI) -> None:
    """Render TeamUpError and HTTPException with the same `detail` + `code` shape."""

    @app.exception_handler(TeamUpError)
    async def _teamup_error_handler(request: Request, exc: TeamUpError) -> Response:
        return JSONResponse(status_code=exc.status_code, content=exc.to_public_dict())

    @app.exception_handler(HTTPException)
    async def _http_exception_handler(request: Request, exc: HTTPException) -> Response:
        payload = {"detail": exc.detail, "code": f"http.{exc.status_code}"}
        return JSONResponse(
            status_code=exc.status_code,
            content=payload,
            headers=dict(exc.headers or {}),
        )

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception) -> Response:
        logger.exception("unhandled_exception", path=request.url.path, error=str(exc))
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal Server Error", "code": "internal.unhandled"},
        )
