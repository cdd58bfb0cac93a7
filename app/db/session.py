# app/db/session.py
import os
from collections.abc import AsyncGenerator

from sqlalchemy import create_engine as create_sync_engine, event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.core.config import get_settings
from app.db.base import Base

settings = get_settings()

# Detect if we're running under pytest
IS_TEST = "PYTEST_CURRENT_TEST" in os.environ

engine = create_async_engine(
    settings.DB_URL,
    echo=False,
    future=True,
    # NullPool avoids reusing connections across event loops in tests
    poolclass=NullPool if IS_TEST or settings.DB_URL.startswith("sqlite") else None,
)


if engine.dialect.name == "sqlite":

    # The sqlite driver's own transaction handling breaks SAVEPOINT, which the
    # per-user status recalculation relies on. Emit BEGIN ourselves instead.
    @event.listens_for(engine.sync_engine, "connect")
    def _configure_sqlite_connection(dbapi_connection, connection_record):  # pragma: no cover
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_sqlite_transaction(conn):  # pragma: no cover
        conn.exec_driver_sql("BEGIN")


AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    autoflush=False,
    expire_on_commit=False,
    class_=AsyncSession,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides an async SQLAlchemy session.

    The session is automatically closed when the request is completed.
    """
    async with AsyncSessionLocal() as session:
        yield session


async def init_db_for_startup() -> None:
    """
    Initialize DB schema for application startup.

    Safe to call from FastAPI startup in non-test environments.
    Typically you'd eventually replace this with Alembic migrations.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# ---------------------------------------------------------------------------
# TESTS ONLY: reset schema using a SYNC engine
# ---------------------------------------------------------------------------

def build_sync_db_url(async_url: str) -> str:
    """
    Convert an async driver URL to its synchronous counterpart, e.g.
    'postgresql+asyncpg://...' -> 'postgresql://...' and
    'sqlite+aiosqlite:///...' -> 'sqlite:///...'.
    """
    for async_driver in ("+asyncpg", "+aiosqlite"):
        if async_driver in async_url:
            return async_url.replace(async_driver, "")
    return async_url


def reset_schema_sync() -> None:
    """
    Run drop_all + create_all using a synchronous SQLAlchemy engine.

    This bypasses the async driver entirely, so it is safe to call from
    plain (non-async) pytest fixtures.
    """
    sync_engine = create_sync_engine(build_sync_db_url(settings.DB_URL), future=True)

    with sync_engine.begin() as conn:
        Base.metadata.drop_all(bind=conn)
        Base.metadata.create_all(bind=conn)

    sync_engine.dispose()
