from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from courtbook.config import Settings
from courtbook.context import build_context
from courtbook.services.sessions import Identity

DAY = date(2025, 6, 1)


def broken_session_factory():
    raise OperationalError("SELECT 1", {}, Exception("database is down"))


@pytest.fixture
def settings(tmp_path):
    # File database: concurrent commits from worker threads hit one table
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'court.db'}",
        redis_url=None,
        court_open_hour=8,
        court_close_hour=22,
        price_per_block=Decimal("67.50"),
        currency="BRL",
        auto_create_schema=True,
        log_level="DEBUG",
    )


@pytest.fixture
def ctx(settings):
    context = build_context(settings)
    yield context
    context.db_engine.dispose()


@pytest.fixture
def alice():
    return Identity(identity_id="alice", email="alice@example.com")


@pytest.fixture
def bob():
    return Identity(identity_id="bob", email="bob@example.com")
