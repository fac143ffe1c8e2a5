from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from core.exceptions import ValidationError
from schemas.posts import REQUIRED_TEXT_FIELDS, PostCreate, PostOut, PostUpdate

MISSING_FIELDS_MESSAGE = "Title, content, excerpt, and author are required"
# Upper bound of a 32-bit signed INTEGER column
MAX_POST_ID = 2**31 - 1


def validate_post_id(post_id: Any) -> int:
    # bool is an int subclass; True must not address post 1
    if isinstance(post_id, bool) or not isinstance(post_id, int) or not 0 < post_id <= MAX_POST_ID:
        raise ValidationError("Invalid post ID")
    return post_id


def validate_new_post(data: PostCreate) -> None:
    missing = [name for name in REQUIRED_TEXT_FIELDS if not getattr(data, name)]
    if missing:
        raise ValidationError(
            MISSING_FIELDS_MESSAGE,
            details=[{"field": name, "message": "Field must not be empty"} for name in missing],
        )


def validate_changes(data: PostUpdate) -> dict[str, Any]:
    changes = data.changes()
    for name, value in changes.items():
        if name == "published":
            if value is None:
                raise ValidationError("published must be a boolean")
        elif not value:
            raise ValidationError(f"{name} must not be empty")
    return changes


def validate_query(query: str | None) -> str:
    """Reject a missing or blank query; a valid query is matched exactly as given."""
    if query is None or not query.strip():
        raise ValidationError("Search query is required")
    return query


class PostStore(ABC):
    """Persistence abstraction for posts.

    Every backend keeps the same contract: listings and search only return
    published posts, newest first (ties by id, newest first), drafts stay
    reachable through `get_by_id`, and ids are never reused.
    """

    backend: str = "abstract"

    async def initialize(self) -> None:
        """Prepare the backend. Safe to call more than once."""

    async def close(self) -> None:
        """Release backend resources. Safe to call more than once."""

    @abstractmethod
    async def ping(self) -> bool: ...

    @abstractmethod
    async def create(self, data: PostCreate) -> PostOut: ...

    @abstractmethod
    async def get_by_id(self, post_id: int) -> PostOut | None: ...

    @abstractmethod
    async def list_published(self) -> list[PostOut]: ...

    @abstractmethod
    async def list_all(self) -> list[PostOut]: ...

    @abstractmethod
    async def update(self, post_id: int, data: PostUpdate) -> PostOut: ...

    @abstractmethod
    async def delete(self, post_id: int) -> bool: ...

    @abstractmethod
    async def search(self, query: str) -> list[PostOut]: ...
