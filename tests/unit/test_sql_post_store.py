from contextlib import asynccontextmanager

import pytest
from sqlalchemy import text
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from core.exceptions import StorageError
from db.models.post import Post
from db.repositories import SqlPostStore
from schemas.posts import PostUpdate
from tests.factories.posts import create_post


def _failing_session(exc: Exception, calls: list[int] | None = None):
    @asynccontextmanager
    async def session():
        if calls is not None:
            calls.append(1)
        raise exc
        yield  # pragma: no cover

    return session


@pytest.mark.unit
@pytest.mark.anyio
async def test_initialize_is_idempotent(sql_store: SqlPostStore):
    await create_post(sql_store)

    await sql_store.initialize()

    assert len(await sql_store.list_all()) == 1


@pytest.mark.unit
@pytest.mark.anyio
async def test_table_defaults_apply_to_raw_inserts(sql_store: SqlPostStore):
    async with sql_store.database.session() as session:
        await session.execute(
            text("INSERT INTO posts (title, content, excerpt, author) VALUES ('T', 'C', 'E', 'A')")
        )

    [post] = await sql_store.list_all()

    assert post.published is False
    assert post.created_at is not None
    assert post.updated_at is not None


@pytest.mark.unit
@pytest.mark.anyio
async def test_create_database_error(sql_store: SqlPostStore, monkeypatch):
    monkeypatch.setattr(sql_store.database, "session", _failing_session(SQLAlchemyError("Database connection failed")))

    with pytest.raises(StorageError) as exc_info:
        await create_post(sql_store)

    assert exc_info.value.message == "Database failure"
    assert isinstance(exc_info.value.__cause__, SQLAlchemyError)


@pytest.mark.unit
@pytest.mark.anyio
async def test_update_database_error(sql_store: SqlPostStore, monkeypatch):
    monkeypatch.setattr(sql_store.database, "session", _failing_session(SQLAlchemyError("Database connection failed")))

    with pytest.raises(StorageError):
        await sql_store.update(1, PostUpdate(title="New Title"))


@pytest.mark.unit
@pytest.mark.anyio
async def test_delete_database_error(sql_store: SqlPostStore, monkeypatch):
    monkeypatch.setattr(sql_store.database, "session", _failing_session(SQLAlchemyError("Database connection failed")))

    with pytest.raises(StorageError):
        await sql_store.delete(1)


@pytest.mark.unit
@pytest.mark.anyio
async def test_read_retries_operational_errors_then_fails(sql_store: SqlPostStore, monkeypatch):
    calls: list[int] = []
    sleeps: list[float] = []

    async def fake_sleep(delay: float) -> None:
        sleeps.append(delay)

    monkeypatch.setattr("db.repositories.decorators.asyncio.sleep", fake_sleep)
    monkeypatch.setattr(
        sql_store.database,
        "session",
        _failing_session(OperationalError("SELECT", {}, Exception("database is locked")), calls),
    )

    with pytest.raises(StorageError):
        await sql_store.list_published()

    assert len(calls) == 3
    assert sleeps == [0.1, 0.2]


@pytest.mark.unit
@pytest.mark.anyio
async def test_search_database_error_is_not_retried(sql_store: SqlPostStore, monkeypatch):
    calls: list[int] = []
    monkeypatch.setattr(sql_store.database, "session", _failing_session(SQLAlchemyError("boom"), calls))

    with pytest.raises(StorageError):
        await sql_store.search("python")

    assert len(calls) == 1


@pytest.mark.unit
@pytest.mark.anyio
async def test_ping_reports_unreachable_database(sql_store: SqlPostStore, monkeypatch):
    async def broken_check() -> bool:
        return False

    monkeypatch.setattr(sql_store.database, "check_connection", broken_check)

    assert await sql_store.ping() is False


@pytest.mark.unit
def test_post_model_repr_and_str():
    post = Post(id=7, title="A very long title that keeps going on and on", author="Amy", published=False)

    assert repr(post) == "<Post(id=7, title='A very long title that keeps g...', author='Amy')>"
    assert str(post) == "Post 'A very long title that keeps going on and on' by Amy (Draft)"
