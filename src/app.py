from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from api.handlers.exceptions import register_exception_handlers
from api.middleware.request_id import register_request_id_middleware
from api.middleware.security_headers import register_security_headers_middleware
from api.routes import router as api_router
from api.routes.system import router as system_router
from core.config import Settings, get_settings
from core.logging import setup_logging
from db.repositories import PostStore, build_post_store

logger = logging.getLogger(__name__)


def _build_lifespan(settings: Settings, store: PostStore | None):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Starting up %s", settings.api_title)

        post_store = store or build_post_store(settings)
        try:
            await post_store.initialize()
            if settings.server.check_db_on_start:
                if not await post_store.ping():
                    logger.error("Post store health check failed")
                    raise RuntimeError("Post store health check failed")
                logger.info("Post store connection verified")
            else:
                logger.debug("Skipping store health check on startup (DB_CHECK_ON_START=false)")
        except Exception as e:  # pragma: no cover - startup failures should be visible in logs
            logger.error("Application startup failed: %s", e)
            await post_store.close()
            raise

        app.state.post_store = post_store
        logger.info("Application startup completed")

        yield

        logger.info("Shutting down %s", settings.api_title)
        app.state.post_store = None
        try:
            await post_store.close()
            logger.info("Application shutdown completed")
        except Exception as e:  # pragma: no cover
            logger.error("Error during shutdown: %s", e)

    return lifespan


def create_app(settings: Settings | None = None, store: PostStore | None = None) -> FastAPI:
    """Build the API application.

    `store` lets callers supply a ready store instead of the configured one;
    either way the store lives for the duration of the app lifespan.
    """
    settings = settings or get_settings()
    setup_logging(settings)

    show_docs = settings.environment != "production"
    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description=settings.api_description,
        debug=settings.debug,
        lifespan=_build_lifespan(settings, store),
        docs_url="/docs" if show_docs else None,
        redoc_url="/redoc" if show_docs else None,
        openapi_url="/openapi.json" if show_docs else None,
    )
    app.state.settings = settings
    app.state.post_store = None

    # Routers
    app.include_router(api_router)
    app.include_router(system_router)

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["*"],
            allow_credentials=False,
            max_age=3600,
        )

    # Middlewares
    register_request_id_middleware(app)
    register_security_headers_middleware(app, settings)

    # Exception handlers
    register_exception_handlers(app)

    return app
