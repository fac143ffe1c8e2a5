from __future__ import annotations

from collections.abc import Awaitable, Callable
import logging
import time
from typing import TYPE_CHECKING
import uuid

from fastapi import Request
from fastapi.responses import Response

from api.utils.request_context import extract_client
from core.logging import ACCESS_LOGGER

if TYPE_CHECKING:  # pragma: no cover
    from fastapi import FastAPI

logger = logging.getLogger(ACCESS_LOGGER)


def register_request_id_middleware(app: FastAPI) -> None:
    """Attach Request-ID middleware that sets X-Request-Id and logs one access line."""

    @app.middleware("http")
    async def add_request_id(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:  # noqa: D401
        req_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        request.state.request_id = req_id
        started = time.perf_counter()
        response = await call_next(request)
        response.headers.setdefault("X-Request-Id", req_id)
        logger.debug(
            "%s %s -> %s in %.1fms [request_id=%s client=%s]",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
            req_id,
            extract_client(request),
        )
        return response
