from typing import Annotated

from fastapi import Depends, Request

from db.repositories.base import PostStore


def get_post_store(request: Request) -> PostStore:
    """Return the store constructed for this application during startup."""
    store = getattr(request.app.state, "post_store", None)
    if store is None:
        raise RuntimeError("Post store is not initialized")
    return store


PostStoreDep = Annotated[PostStore, Depends(get_post_store)]
