from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Body, Query, status

from api.utils.request_context import parse_post_id
from core.deps import PostStoreDep
from schemas.posts import PostCreate, PostUpdate
from schemas.responses import ErrorResponse, MessageResponse, PostListResponse, PostResponse
from services import post_service

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}

router = APIRouter(
    prefix="/posts",
    tags=["Posts"],
    responses=ERROR_RESPONSES,
)


@router.get(
    "",
    response_model=PostListResponse,
    summary="List posts",
    description="Get all published posts, newest first. Drafts are included only on request.",
)
async def list_posts(
    store: PostStoreDep,
    include_drafts: bool = Query(False, description="Also return unpublished posts"),
) -> PostListResponse:
    return await post_service.list_posts(store, include_drafts=include_drafts)


@router.post(
    "",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create post",
    description="Create a new post. Title, content, excerpt and author are required; drafts are the default.",
)
async def create_post(
    store: PostStoreDep,
    post_data: Annotated[PostCreate, Body(...)],
) -> PostResponse:
    return await post_service.create_post(store, post_data)


@router.get(
    "/{post_id}",
    response_model=PostResponse,
    summary="Get post by ID",
    description="Fetch a single post by its identifier, drafts included.",
)
async def get_post(post_id: str, store: PostStoreDep) -> PostResponse:
    return await post_service.get_post(store, parse_post_id(post_id))


@router.put(
    "/{post_id}",
    response_model=PostResponse,
    summary="Update post",
    description="Replace any subset of title, content, excerpt, author and published. Omitted fields keep their values.",
)
async def update_post(
    post_id: str,
    store: PostStoreDep,
    post_data: Annotated[PostUpdate, Body(...)],
) -> PostResponse:
    return await post_service.update_post(store, parse_post_id(post_id), post_data)


@router.delete(
    "/{post_id}",
    response_model=MessageResponse,
    summary="Delete post",
    description="Delete a post by ID. Returns a confirmation message.",
)
async def delete_post(post_id: str, store: PostStoreDep) -> MessageResponse:
    return await post_service.delete_post(store, parse_post_id(post_id))
