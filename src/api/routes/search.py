from __future__ import annotations

from fastapi import APIRouter, Query

from core.deps import PostStoreDep
from db.repositories.base import validate_query
from schemas.responses import SearchResponse
from services import post_service

router = APIRouter(prefix="/search", tags=["Search"])


@router.get(
    "",
    response_model=SearchResponse,
    summary="Search posts",
    description="Case-insensitive substring search over title, content and excerpt of published posts.",
)
async def search_posts(
    store: PostStoreDep,
    q: str | None = Query(None, description="Text to look for"),
) -> SearchResponse:
    return await post_service.search_posts(store, validate_query(q))
