import logging

import pytest

from core.config import Settings
from core.logging import ACCESS_LOGGER, setup_logging


@pytest.fixture(autouse=True)
def _restore_development_logging(monkeypatch):
    yield
    monkeypatch.setenv("ENVIRONMENT", "development")
    setup_logging(Settings())


@pytest.mark.unit
def test_access_log_enabled_in_development(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "development")

    setup_logging(Settings())

    assert logging.getLogger(ACCESS_LOGGER).level == logging.DEBUG
    assert logging.getLogger("sqlalchemy.engine").level == logging.INFO


@pytest.mark.unit
def test_production_silences_access_log(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "production")

    setup_logging(Settings())

    assert logging.getLogger().level == logging.WARNING
    assert logging.getLogger(ACCESS_LOGGER).level == logging.WARNING
    assert logging.getLogger("aiosqlite").level == logging.WARNING
