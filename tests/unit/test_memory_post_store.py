from datetime import UTC, datetime

import pytest

from core.config import Settings
from db.repositories import InMemoryPostStore, SqlPostStore, build_post_store
from db.repositories.memory_repository import SAMPLE_POSTS
from tests.factories.posts import create_post


@pytest.mark.unit
@pytest.mark.anyio
async def test_sample_posts_are_published_newest_first():
    store = InMemoryPostStore.with_sample_posts()

    posts = await store.list_published()

    assert [p.author for p in posts] == ["Michael Rodriguez", "Sarah Johnson", "Alex Chen"]
    assert posts[-1].created_at == datetime(2025, 1, 15, 10, 30, tzinfo=UTC)
    assert len(posts) == len(SAMPLE_POSTS)


@pytest.mark.unit
@pytest.mark.anyio
async def test_sample_posts_are_searchable():
    store = InMemoryPostStore.with_sample_posts()

    results = await store.search("css grid")

    assert [p.title for p in results] == ["Building Responsive UIs with Modern CSS"]


@pytest.mark.unit
@pytest.mark.anyio
async def test_new_posts_follow_sample_ids():
    store = InMemoryPostStore.with_sample_posts()

    post = await create_post(store)

    assert post.id == len(SAMPLE_POSTS) + 1


@pytest.mark.unit
@pytest.mark.anyio
async def test_returned_posts_are_copies(memory_store: InMemoryPostStore):
    post = await create_post(memory_store)
    post.title = "Mutated outside the store"

    fetched = await memory_store.get_by_id(post.id)

    assert fetched is not None
    assert fetched.title == "Hello"


@pytest.mark.unit
def test_build_post_store_memory(monkeypatch):
    monkeypatch.setenv("STORE_BACKEND", "memory")
    monkeypatch.setenv("SEED_SAMPLE_POSTS", "true")

    store = build_post_store(Settings())

    assert isinstance(store, InMemoryPostStore)
    assert store.backend == "memory"


@pytest.mark.unit
def test_build_post_store_sql(monkeypatch):
    monkeypatch.setenv("STORE_BACKEND", "sql")
    monkeypatch.setenv("DATABASE_URL", "sqlite:///./blog.db")

    store = build_post_store(Settings())

    assert isinstance(store, SqlPostStore)
    assert store.database.url == "sqlite+aiosqlite:///./blog.db"
