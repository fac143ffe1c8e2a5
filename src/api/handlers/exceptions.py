from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.exceptions import BlogException, StorageError, map_exception_to_http
from db.repositories.base import MISSING_FIELDS_MESSAGE
from schemas.posts import REQUIRED_TEXT_FIELDS

if TYPE_CHECKING:  # pragma: no cover
    from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)


def _error_body(message: str, details: Any = None) -> dict[str, Any]:
    body: dict[str, Any] = {"error": message}
    if details:
        body["details"] = details
    return body


def _summarize_request_errors(exc: RequestValidationError) -> tuple[str, list[dict[str, Any]]]:
    details: list[dict[str, Any]] = []
    missing_required = False
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ())]
        field = ".".join(loc[1:]) or ".".join(loc)
        details.append({"field": field, "message": err.get("msg", "Invalid value")})
        if err.get("type") == "missing" and loc[:1] == ["body"] and field in REQUIRED_TEXT_FIELDS:
            missing_required = True
    message = MISSING_FIELDS_MESSAGE if missing_required else "Invalid request"
    return message, details


def register_exception_handlers(app: FastAPI) -> None:
    """Register application-wide exception handlers."""

    @app.exception_handler(BlogException)
    async def blog_exception_handler(request: Request, exc: BlogException) -> JSONResponse:  # noqa: D401
        http_exc = map_exception_to_http(exc)
        if isinstance(exc, StorageError):
            # The cause was already logged where it happened; keep the reply generic
            return JSONResponse(status_code=http_exc.status_code, content=_error_body(exc.message))
        return JSONResponse(status_code=http_exc.status_code, content=_error_body(exc.message, exc.details))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:  # noqa: D401
        message, details = _summarize_request_errors(exc)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=_error_body(message, details))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:  # noqa: D401
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body("Internal server error"),
        )
