# backend/courtbook/database.py

from pathlib import Path

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base


def create_db_engine(database_url: str) -> Engine:
    """
    Create the SQLAlchemy engine.

    SQLite: check_same_thread=False because store calls run in worker threads;
    in-memory databases share one connection so every thread sees the same data.
    """
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return create_engine(database_url, pool_pre_ping=True)

    kwargs = {"connect_args": {"check_same_thread": False}}
    if url.database in (None, "", ":memory:"):
        kwargs["poolclass"] = StaticPool
    else:
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(database_url, **kwargs)

    # Foreign keys are off by default in SQLite
    @event.listens_for(engine, "connect")
    def enable_sqlite_fk(dbapi_connection, _):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )


def init_schema(engine: Engine) -> None:
    """Create missing tables (development / tests; production uses alembic)."""
    Base.metadata.create_all(engine)
