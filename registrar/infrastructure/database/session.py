# registrar/infrastructure/database/session.py

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import AsyncAdaptedQueuePool

Base = declarative_base()


def _is_memory_sqlite(url) -> bool:
    return url.database in (None, "", ":memory:")


def _serialize_sqlite_writers(engine: AsyncEngine) -> None:
    """Take the database write lock at BEGIN so check-then-insert cannot interleave."""

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # Stop the driver from issuing its own deferred BEGIN.
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(
    database_url: str,
    *,
    pool_size: int = 10,
    max_overflow: int = 20,
) -> AsyncEngine:
    """
    PostgreSQL runs every transaction at SERIALIZABLE; SQLite gets BEGIN IMMEDIATE,
    which serializes writers database-wide.
    """
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        kwargs = {"echo": False}
        if _is_memory_sqlite(url):
            # One connection holds the whole database; a second transaction waits for checkout.
            kwargs.update(poolclass=AsyncAdaptedQueuePool, pool_size=1, max_overflow=0)
        engine = create_async_engine(url, **kwargs)
        _serialize_sqlite_writers(engine)
        return engine

    return create_async_engine(
        url,
        echo=False,
        pool_pre_ping=True,
        pool_size=pool_size,
        max_overflow=max_overflow,
        isolation_level="SERIALIZABLE",
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autoflush=False,
        class_=AsyncSession,
    )


async def create_schema(engine: AsyncEngine) -> None:
    """Create all tables. For local runs and tests; production schemas are managed out of band."""
    from registrar.infrastructure.database import models  # noqa: F401  registers tables

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
