from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
import logging
from typing import Any

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from core.config_models import DatabaseConfig

logger = logging.getLogger(__name__)

Base = declarative_base()


def to_async_dsn(url: str) -> str:
    if "+asyncpg" in url or "+aiosqlite" in url:
        return url
    if url.startswith("postgresql+psycopg2://"):
        return url.replace("postgresql+psycopg2://", "postgresql+asyncpg://", 1)
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+asyncpg://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("sqlite://"):
        return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return url


def _engine_options(url: str, cfg: DatabaseConfig) -> dict[str, Any]:
    if url.startswith("sqlite"):
        options: dict[str, Any] = {"echo": cfg.echo}
        if ":memory:" in url or url.endswith("://"):
            # A private in-memory database only lives as long as its connection
            options["poolclass"] = StaticPool
            options["connect_args"] = {"check_same_thread": False}
        return options
    return {
        "echo": cfg.echo,
        "pool_size": cfg.pool_size,
        "max_overflow": cfg.max_overflow,
        "pool_pre_ping": cfg.pool_pre_ping,
        "pool_timeout": cfg.pool_timeout,
        "pool_recycle": 3600,
    }


def _unicode_lower(value: Any) -> Any:
    return value.lower() if isinstance(value, str) else value


def _register_sqlite_functions(engine: AsyncEngine) -> None:
    # Built-in lower() only folds ASCII; case-insensitive search must fold any letter
    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_conn, _record) -> None:
        dbapi_conn.create_function("lower", 1, _unicode_lower)


class Database:
    """Owns the async engine and session factory for one application instance.

    Engine creation is lazy so constructing a Database never opens a pool;
    `dispose()` returns it to the unconfigured state.
    """

    def __init__(self, config: DatabaseConfig) -> None:
        self.config = config
        self.url = to_async_dsn(config.url)
        self._engine: AsyncEngine | None = None
        self._session_maker: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            self._engine = create_async_engine(self.url, **_engine_options(self.url, self.config))
            if self.url.startswith("sqlite"):
                _register_sqlite_functions(self._engine)
            logger.debug("AsyncEngine created")
        return self._engine

    @property
    def session_maker(self) -> async_sessionmaker[AsyncSession]:
        if self._session_maker is None:
            self._session_maker = async_sessionmaker(
                bind=self.engine,
                autoflush=False,
                expire_on_commit=False,
            )
            logger.debug("Async sessionmaker created")
        return self._session_maker

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession]:
        """Yield a session that commits on success and rolls back on error."""
        async with self.session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception as e:
                await session.rollback()
                logger.error("Error in async DB session: %s", e)
                raise

    async def create_tables(self) -> None:
        # Import models so their tables are registered on Base.metadata
        from db.models import post as _post_model  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.debug("Database tables ensured")

    async def check_connection(self) -> bool:
        try:
            async with self.engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
            logger.info("Database connection is healthy")
            return True
        except Exception as e:
            logger.error("Database connection check failed: %s", e)
            return False

    async def dispose(self) -> None:
        try:
            if self._engine is not None:
                await self._engine.dispose()
                logger.info("Database connections closed")
        finally:
            self._engine = None
            self._session_maker = None
