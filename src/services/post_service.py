from collections.abc import Callable
import functools
import logging
from typing import Any

from core.exceptions import NotFoundError, StorageError
from db.repositories.base import PostStore
from schemas.posts import PostCreate, PostUpdate
from schemas.responses import MessageResponse, PostListResponse, PostResponse, SearchResponse

logger = logging.getLogger(__name__)

POST_DELETED_MESSAGE = "Post deleted successfully"


def failure_message(message: str):
    """Replace storage failure details with a generic, caller-safe message.

    The original exception stays chained and logged for operators.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except StorageError as e:
                logger.error("%s: %r", message, e.__cause__ or e)
                raise StorageError(message=message) from e

        return wrapper

    return decorator


@failure_message("Failed to fetch posts")
async def list_posts(store: PostStore, *, include_drafts: bool = False) -> PostListResponse:
    posts = await store.list_all() if include_drafts else await store.list_published()
    return PostListResponse(posts=posts)


@failure_message("Failed to fetch post")
async def get_post(store: PostStore, post_id: int) -> PostResponse:
    post = await store.get_by_id(post_id)
    if post is None:
        raise NotFoundError("Post not found")
    return PostResponse(post=post)


@failure_message("Failed to create post")
async def create_post(store: PostStore, post_data: PostCreate) -> PostResponse:
    return PostResponse(post=await store.create(post_data))


@failure_message("Failed to update post")
async def update_post(store: PostStore, post_id: int, post_data: PostUpdate) -> PostResponse:
    return PostResponse(post=await store.update(post_id, post_data))


@failure_message("Failed to delete post")
async def delete_post(store: PostStore, post_id: int) -> MessageResponse:
    if not await store.delete(post_id):
        raise NotFoundError("Post not found")
    return MessageResponse(message=POST_DELETED_MESSAGE)


@failure_message("Failed to search posts")
async def search_posts(store: PostStore, query: str) -> SearchResponse:
    posts = await store.search(query)
    return SearchResponse(posts=posts, query=query)
