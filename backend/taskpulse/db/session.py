import logging
import sqlite3
import time
from pathlib import Path

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session

from ..core.config import Settings

log = logging.getLogger(__name__)


class BootstrapError(RuntimeError):
    """The database never became reachable during startup."""


def _register_sqlite_functions(dbapi_connection, _record) -> None:
    # PostgreSQL built-ins the health check and db-heavy probe rely on
    dbapi_connection.create_function("pg_sleep", 1, time.sleep)
    dbapi_connection.create_function("version", 0, lambda: f"SQLite {sqlite3.sqlite_version}")


def make_engine(settings: Settings) -> Engine:
    """Build the process-wide engine with a bounded connection pool."""
    url = make_url(settings.DATABASE_URL)
    kwargs = dict(
        echo=False,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=0,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_pre_ping=True,
    )
    if url.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            # one shared connection, or every checkout sees an empty database
            kwargs = dict(echo=False, connect_args=kwargs["connect_args"], poolclass=StaticPool)

    engine = create_engine(url, **kwargs)
    if url.get_backend_name() == "sqlite":
        event.listen(engine, "connect", _register_sqlite_functions)
    return engine


def init_db(engine: Engine) -> None:
    from . import models  # noqa: F401
    url = engine.url
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    SQLModel.metadata.create_all(engine)


def bootstrap(engine: Engine, settings: Settings, sleep=time.sleep) -> None:
    """
    Create the schema and seed sample data, retrying while the database
    is unreachable.

    Makes at most DB_CONNECT_RETRIES attempts spaced DB_CONNECT_BACKOFF_SECONDS
    apart, then raises BootstrapError.
    """
    from .seed import seed

    retries = settings.DB_CONNECT_RETRIES
    while True:
        try:
            init_db(engine)
            if settings.SEED_ON_STARTUP:
                seed(engine)
            return
        except SQLAlchemyError as e:
            retries -= 1
            if retries <= 0:
                log.error("Failed to connect to database after %d retries: %s",
                          settings.DB_CONNECT_RETRIES, e)
                raise BootstrapError("database unavailable") from e
            log.warning("Database not ready, retrying in %ss... (%d retries left)",
                        settings.DB_CONNECT_BACKOFF_SECONDS, retries)
            sleep(settings.DB_CONNECT_BACKOFF_SECONDS)


def get_engine(request: Request) -> Engine:
    return request.app.state.engine


def get_session(request: Request):
    with Session(request.app.state.engine) as session:
        yield session
