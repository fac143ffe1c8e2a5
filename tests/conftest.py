# ruff: noqa: E402
# IMPORTANT:
# 1) Set environment variables first, then import application modules:
#    core.config builds the settings object at import time.
# 2) Store fixtures are function scoped so each test starts from an empty store.

from collections.abc import AsyncGenerator
import os


def _setup_test_environment() -> None:
    """Point the application at an in-memory store before any app import."""
    os.environ.setdefault("ENVIRONMENT", "development")
    os.environ.setdefault("STORE_BACKEND", "memory")
    os.environ.setdefault("SEED_SAMPLE_POSTS", "false")
    os.environ.setdefault("DB_CHECK_ON_START", "true")


# --- EARLY ENVIRONMENT INITIALIZATION ---
_setup_test_environment()

# isort: off
from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient
import pytest

from app import create_app
from core.config import Settings
from core.config_models import DatabaseConfig
from db.database import Database
from db.repositories import InMemoryPostStore, PostStore, SqlPostStore

# isort: on

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Run every anyio-marked test and async fixture on asyncio."""
    return "asyncio"


@pytest.fixture
def memory_store() -> InMemoryPostStore:
    return InMemoryPostStore()


@pytest.fixture
async def sql_store() -> AsyncGenerator[SqlPostStore]:
    store = SqlPostStore(Database(DatabaseConfig(url=TEST_DATABASE_URL)))
    await store.initialize()
    try:
        yield store
    finally:
        await store.close()


@pytest.fixture(params=["memory", "sql"])
async def store(request) -> AsyncGenerator[PostStore]:
    """Run the same test against every store backend."""
    if request.param == "memory":
        yield InMemoryPostStore()
        return
    sql = SqlPostStore(Database(DatabaseConfig(url=TEST_DATABASE_URL)))
    await sql.initialize()
    try:
        yield sql
    finally:
        await sql.close()


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def app(settings: Settings, store: PostStore):
    """FastAPI application wired to the parametrized store."""
    return create_app(settings, store=store)


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client with app lifespan management."""
    async with LifespanManager(app):
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="https://testserver.local",
            follow_redirects=True,
        ) as ac:
            yield ac


@pytest.fixture
async def unit_client(settings: Settings, memory_store: InMemoryPostStore) -> AsyncGenerator[AsyncClient]:
    """Client over the in-memory store only; used when service calls are monkeypatched."""
    _app = create_app(settings, store=memory_store)
    async with LifespanManager(_app):
        async with AsyncClient(
            transport=ASGITransport(app=_app),
            base_url="https://testserver.local",
            follow_redirects=True,
        ) as ac:
            yield ac
