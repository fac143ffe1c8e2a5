from __future__ import annotations

import logging

from core.config import Settings
from db.database import Database
from db.repositories.base import PostStore
from db.repositories.memory_repository import InMemoryPostStore
from db.repositories.post_repository import SqlPostStore

logger = logging.getLogger(__name__)


def build_post_store(settings: Settings) -> PostStore:
    """Construct the store selected by configuration. Called once per process."""
    if settings.store.backend == "memory":
        if settings.store.seed_sample_posts:
            store: PostStore = InMemoryPostStore.with_sample_posts()
        else:
            store = InMemoryPostStore()
    else:
        if settings.database is None:
            raise RuntimeError("Database configuration not initialized")
        store = SqlPostStore(Database(settings.database))
    logger.info("Using %s post store", store.backend)
    return store


__all__ = ["InMemoryPostStore", "PostStore", "SqlPostStore", "build_post_store"]
