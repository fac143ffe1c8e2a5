from typing import Any

from db.repositories.base import PostStore
from schemas.posts import PostCreate, PostOut


def post_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "title": "Hello",
        "content": "World body",
        "excerpt": "Hi",
        "author": "Amy",
        "published": True,
    }
    payload.update(overrides)
    return payload


async def create_post(store: PostStore, **overrides: Any) -> PostOut:
    return await store.create(PostCreate(**post_payload(**overrides)))
