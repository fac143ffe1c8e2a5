from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
import itertools
import logging

from core.exceptions import NotFoundError
from db.repositories.base import (
    PostStore,
    validate_changes,
    validate_new_post,
    validate_post_id,
    validate_query,
)
from db.utils import utcnow
from schemas.posts import PostCreate, PostOut, PostUpdate

logger = logging.getLogger(__name__)

# Posts served by the development preview before a database is attached
SAMPLE_POSTS: tuple[tuple[PostCreate, str], ...] = (
    (
        PostCreate(
            title="The Future of Web Development in 2025",
            content=(
                "The landscape of web development continues to evolve at breakneck speed. "
                "As we navigate through 2025, several key trends are reshaping how we build "
                "and deploy applications.\n\n## Edge Computing Revolution\n\nEdge computing has "
                "moved from a nice-to-have to an essential architecture pattern."
            ),
            excerpt=(
                "Exploring the latest trends in web development for 2025, including edge computing, "
                "serverless databases, and AI-powered development tools."
            ),
            author="Alex Chen",
            published=True,
        ),
        "2025-01-15T10:30:00Z",
    ),
    (
        PostCreate(
            title="Building Responsive UIs with Modern CSS",
            content=(
                "Modern CSS has evolved tremendously, giving developers powerful tools to create "
                "responsive, beautiful user interfaces without relying heavily on frameworks.\n\n"
                "## CSS Grid: The Layout Revolution\n\nCSS Grid has revolutionized how we approach "
                "layout design."
            ),
            excerpt=(
                "Learn how modern CSS features like Grid, Container Queries, and Custom Properties "
                "are revolutionizing responsive web design."
            ),
            author="Sarah Johnson",
            published=True,
        ),
        "2025-02-22T14:15:00Z",
    ),
    (
        PostCreate(
            title="Getting Started with Cloudflare D1 Database",
            content=(
                "Cloudflare D1 is a serverless SQL database that runs on Cloudflare's global network. "
                "In this tutorial, we'll explore how to set up and use D1 for your next project.\n\n"
                "## What is Cloudflare D1?\n\nD1 is built on SQLite, one of the most widely deployed "
                "database engines in the world."
            ),
            excerpt=(
                "A comprehensive guide to getting started with Cloudflare D1, the serverless SQL "
                "database that runs at the edge."
            ),
            author="Michael Rodriguez",
            published=True,
        ),
        "2025-03-08T09:45:00Z",
    ),
)


def _newest_first(posts: Iterable[PostOut]) -> list[PostOut]:
    ordered = sorted(posts, key=lambda p: (p.created_at, p.id), reverse=True)
    return [p.model_copy() for p in ordered]


class InMemoryPostStore(PostStore):
    """Dict-backed post store for development and tests.

    Operations never await, so each one runs to completion without
    interleaving with other requests on the event loop.
    """

    backend = "memory"

    def __init__(self) -> None:
        self._posts: dict[int, PostOut] = {}
        self._ids = itertools.count(1)

    @classmethod
    def with_sample_posts(cls) -> InMemoryPostStore:
        store = cls()
        for data, created_at in SAMPLE_POSTS:
            store._insert(data, datetime.fromisoformat(created_at))
        logger.debug("Seeded in-memory store with %s sample posts", len(SAMPLE_POSTS))
        return store

    async def ping(self) -> bool:
        return True

    async def create(self, data: PostCreate) -> PostOut:
        validate_new_post(data)
        post = self._insert(data, utcnow())
        logger.info("Created new post with id %s", post.id)
        return post.model_copy()

    async def get_by_id(self, post_id: int) -> PostOut | None:
        post = self._posts.get(validate_post_id(post_id))
        if post is None:
            logger.info("Post with id %s not found", post_id)
            return None
        return post.model_copy()

    async def list_published(self) -> list[PostOut]:
        return _newest_first(p for p in self._posts.values() if p.published)

    async def list_all(self) -> list[PostOut]:
        return _newest_first(self._posts.values())

    async def update(self, post_id: int, data: PostUpdate) -> PostOut:
        post_id = validate_post_id(post_id)
        changes = validate_changes(data)
        current = self._posts.get(post_id)
        if current is None:
            logger.info("Skip update: post %s not found", post_id)
            raise NotFoundError("Post not found")
        updated = current.model_copy(update={**changes, "updated_at": utcnow()})
        self._posts[post_id] = updated
        logger.info("Updated %s for post %s", sorted(changes) or "timestamp", post_id)
        return updated.model_copy()

    async def delete(self, post_id: int) -> bool:
        post_id = validate_post_id(post_id)
        if self._posts.pop(post_id, None) is None:
            logger.info("Skip delete: post %s not found", post_id)
            return False
        logger.info("Deleted post with id %s", post_id)
        return True

    async def search(self, query: str) -> list[PostOut]:
        term = validate_query(query).lower()
        return _newest_first(
            p
            for p in self._posts.values()
            if p.published and any(term in text.lower() for text in (p.title, p.content, p.excerpt))
        )

    def _insert(self, data: PostCreate, created_at: datetime) -> PostOut:
        post = PostOut(id=next(self._ids), **data.model_dump(), created_at=created_at, updated_at=created_at)
        self._posts[post.id] = post
        return post
