"""Database engine, session factory and request-scoped session dependency."""
from typing import AsyncIterator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from .logging import get_logger
from .settings import app_settings

logger = get_logger(__name__)


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """Turn on foreign key enforcement for every SQLite connection."""
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_engine(database_url: str, echo: bool = False, **kwargs) -> AsyncEngine:
    """Create an async engine for the given URL."""
    engine = create_async_engine(database_url, echo=echo, **kwargs)
    enable_sqlite_foreign_keys(engine)
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Build a session factory that keeps objects usable after commit."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


engine = create_engine(app_settings.database_url, echo=app_settings.database_echo)
async_session_factory = create_session_factory(engine)


async def init_db(bind: AsyncEngine = engine) -> None:
    """Create all tables that do not exist yet."""
    from ..models import Base

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("database_initialized", dialect=bind.dialect.name)


async def get_db() -> AsyncIterator[AsyncSession]:
    """Yield a session whose transaction spans the whole request.

    Commits when the handler returns normally and rolls back on any error.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
