from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import MetaData, event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from cms_api.config import settings

# Naming conventions for database constraints.
# Alembic needs stable names to autogenerate constraint changes.
NAMING_CONVENTION: dict[str, str] = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models.

    Base.metadata tracks every registered table; the naming_convention keeps
    constraint names predictable for Alembic migrations.
    """

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str, **overrides: Any) -> AsyncEngine:
    """Create an async engine for ``url``.

    PostgreSQL gets the pooled configuration from settings. SQLite (used by the
    test suite) gets a single shared connection and enforced foreign keys so
    that constraint violations behave like they do in production.
    """
    if url.startswith("sqlite"):
        new_engine = create_async_engine(
            url,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
            echo=settings.db_echo,
            **overrides,
        )
        event.listen(new_engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return new_engine

    options: dict[str, Any] = {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_timeout": settings.db_pool_timeout,
        "pool_recycle": settings.db_pool_recycle,
        "pool_pre_ping": settings.db_pool_pre_ping,
        "echo": settings.db_echo,
        # asyncpg driver options, passed to asyncpg.connect()
        "connect_args": {"command_timeout": settings.db_statement_timeout},
    }
    options.update(overrides)
    return create_async_engine(url, **options)


engine = build_engine(settings.database_url)

# expire_on_commit=False keeps objects usable after commit without re-querying,
# which matters in async code where an implicit refresh would be sync I/O.
async_session = async_sessionmaker(engine, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that provides a database session per request.

    Commits on success, rolls back on exception. This is the single place where
    transaction boundaries are managed: a project write and the category counter
    update that goes with it either both land or neither does. Services and
    repositories flush but never commit.
    """
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def shutdown() -> None:
    """Close all pooled database connections."""
    await engine.dispose()
