from __future__ import annotations

from fastapi import APIRouter

from api.routes.posts import router as posts_router
from api.routes.search import router as search_router

# Aggregate all blog routers under the public API prefix
router = APIRouter(prefix="/api")
router.include_router(posts_router)
router.include_router(search_router)
