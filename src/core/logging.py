import logging

from .config import Settings, settings as default_settings

ACCESS_LOGGER = "nextblog.access"

# Library loggers that flood DEBUG output with per-statement and per-request lines
_QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "aiosqlite")


def setup_logging(settings: Settings | None = None) -> None:
    """
    Configure root logging from settings.logging.

    Safe to call once per app instance: when handlers already exist only the
    levels are refreshed. The request access log is emitted at DEBUG and stays
    silent outside development.
    """
    settings = settings or default_settings
    cfg = settings.logging
    level = getattr(logging, (cfg.level or "INFO").upper(), logging.INFO)

    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
    else:
        logging.basicConfig(level=level, format=cfg.format)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.INFO))

    access_level = logging.DEBUG if settings.environment == "development" else logging.WARNING
    logging.getLogger(ACCESS_LOGGER).setLevel(access_level)


__all__ = ["ACCESS_LOGGER", "setup_logging"]
