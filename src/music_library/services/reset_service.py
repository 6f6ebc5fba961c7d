"""Database reset service."""
from sqlalchemy import delete, text
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.logging import get_logger
from ..metrics import library_resets_total
from ..models import Album, Artist, Genre, album_genre

logger = get_logger(__name__)


class DatabaseResetService:
    """Wipes every library table and restarts id sequences at 1."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def reset(self) -> None:
        """Delete all albums, artists, genres and their links."""
        dialect = self.db.get_bind().dialect.name

        if dialect == "postgresql":
            await self.db.execute(
                text("TRUNCATE TABLE album_genre, albums, artists, genres RESTART IDENTITY CASCADE")
            )
        else:
            # Children before parents
            for table in (album_genre, Album.__table__, Artist.__table__, Genre.__table__):
                await self.db.execute(delete(table))
            # SQLite reuses max(rowid) + 1, so an empty table restarts at 1

        self.db.expunge_all()
        await self.db.flush()

        library_resets_total.inc()
        logger.warning("database_reset", dialect=dialect)
