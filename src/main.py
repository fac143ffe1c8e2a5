import logging

import uvicorn

from app import create_app
from core.config import settings

logger = logging.getLogger("nextblog")

app = create_app(settings)


if __name__ == "__main__":
    logger.info(
        "Serving %s on %s:%s with the %s post store",
        settings.api_title,
        settings.server.host,
        settings.server.port,
        settings.store.backend,
    )
    uvicorn.run(
        "main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.server.reload,
        log_level=settings.logging.level.lower(),
        access_log=settings.environment == "development",
    )
