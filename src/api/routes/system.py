from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Request

from core.deps import PostStoreDep
from schemas.responses import HealthCheckResponse

router = APIRouter(tags=["System"])


@router.get("/health", tags=["Health"], response_model=HealthCheckResponse)
async def health(store: PostStoreDep) -> HealthCheckResponse:
    ok = await store.ping()
    return HealthCheckResponse(
        success=ok,
        status="ok" if ok else "degraded",
        store=store.backend,
        timestamp=datetime.now(UTC).isoformat(),
    )


@router.get("/", tags=["Root"])
async def root(request: Request) -> dict[str, Any]:
    app = request.app
    return {
        "message": f"Welcome to {app.title}",
        "version": app.version,
        "docs": app.docs_url,
        "health": "/health",
        "timestamp": datetime.now(UTC).isoformat(),
    }
