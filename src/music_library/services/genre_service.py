"""Genre service for managing genres and their album links."""
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..core.exceptions import DuplicateResourceError, NotFoundError
from ..core.logging import get_logger
from ..metrics import (
    album_genre_links_total,
    library_entities_created_total,
    library_entities_deleted_total,
    library_entities_updated_total,
)
from ..models import Album, Genre, casefold_key
from .pagination import Page, PageRequest, paginate

logger = get_logger(__name__)

GENRE_SORTABLE = {
    "id": Genre.id,
    "name": Genre.name,
    "created_at": Genre.created_at,
    "updated_at": Genre.updated_at,
}
GENRE_DEFAULT_SORT = [("id", "asc")]


class GenreService:
    """Service for managing genres."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def list_genres(self, page_request: PageRequest) -> Page[Genre]:
        """Get one page of genres."""
        page = await paginate(self.db, select(Genre), page_request, GENRE_SORTABLE, Genre.id)
        logger.info("retrieved_genres", count=len(page.content), total=page.total_elements, page=page.number)
        return page

    async def get_genre_by_id(self, genre_id: int, with_albums: bool = False) -> Genre:
        """Get a genre by ID, raising NotFoundError if missing.

        Args:
            genre_id: Genre primary key
            with_albums: Eagerly load the genre's albums
        """
        query = select(Genre).where(Genre.id == genre_id)
        if with_albums:
            query = query.options(selectinload(Genre.albums))

        result = await self.db.execute(query)
        genre = result.scalar_one_or_none()

        if genre is None:
            logger.warning("genre_not_found", genre_id=genre_id)
            raise NotFoundError(
                message=f"Genre with ID {genre_id} not found",
                details={"genre_id": genre_id},
            )
        return genre

    async def find_by_name(self, name: str) -> Optional[Genre]:
        """Find a genre by name, ignoring case."""
        result = await self.db.execute(select(Genre).where(Genre.name_key == casefold_key(name)))
        return result.scalar_one_or_none()

    async def _ensure_name_available(self, name: str, exclude_id: Optional[int] = None) -> None:
        existing = await self.find_by_name(name)
        if existing is not None and existing.id != exclude_id:
            raise DuplicateResourceError(
                message=f"Genre with name '{name}' already exists",
                details={"name": name, "existing_id": existing.id},
            )

    async def create_genre(self, name: str, description: Optional[str] = None) -> Genre:
        """Create a genre; names must be unique ignoring case."""
        await self._ensure_name_available(name)

        genre = Genre(name=name, description=description)
        self.db.add(genre)
        await self.db.flush()

        library_entities_created_total.labels(entity="genre").inc()
        logger.info("genre_created", genre_id=genre.id, genre_name=genre.name)
        return genre

    async def update_genre(self, genre_id: int, name: str, description: Optional[str] = None) -> Genre:
        """Replace every field of a genre."""
        genre = await self.get_genre_by_id(genre_id)
        await self._ensure_name_available(name, exclude_id=genre.id)

        genre.name = name
        genre.description = description
        genre.touch()
        await self.db.flush()

        library_entities_updated_total.labels(entity="genre").inc()
        logger.info("genre_updated", genre_id=genre.id, genre_name=genre.name)
        return genre

    async def delete_genre(self, genre_id: int) -> None:
        """Delete a genre; its albums stay, only the links are removed."""
        genre = await self.get_genre_by_id(genre_id, with_albums=True)
        unlinked = len(genre.albums)

        await self.db.delete(genre)
        await self.db.flush()

        library_entities_deleted_total.labels(entity="genre").inc()
        logger.info("genre_deleted", genre_id=genre_id, albums_unlinked=unlinked)

    async def get_albums_for_genre(self, genre_id: int) -> List[Album]:
        """Get all albums in a genre."""
        await self.get_genre_by_id(genre_id)

        query = select(Album).where(Album.genres.any(Genre.id == genre_id)).order_by(Album.id)
        query = query.options(selectinload(Album.artist), selectinload(Album.genres))
        result = await self.db.execute(query)
        albums = list(result.scalars().all())

        logger.info("retrieved_albums_by_genre", genre_id=genre_id, count=len(albums))
        return albums

    async def _load_album(self, album_id: int) -> Album:
        query = select(Album).where(Album.id == album_id).options(selectinload(Album.genres))
        result = await self.db.execute(query)
        album = result.scalar_one_or_none()
        if album is None:
            logger.warning("album_not_found", album_id=album_id)
            raise NotFoundError(
                message=f"Album with ID {album_id} not found",
                details={"album_id": album_id},
            )
        return album

    async def add_album(self, genre_id: int, album_id: int) -> Genre:
        """Link an album to this genre. Linking twice is a no-op."""
        genre = await self.get_genre_by_id(genre_id, with_albums=True)
        album = await self._load_album(album_id)

        if album.add_genre(genre):
            album.touch()
            await self.db.flush()
            album_genre_links_total.labels(action="added").inc()
            logger.info("genre_album_linked", genre_id=genre_id, album_id=album_id)
        return genre

    async def remove_album(self, genre_id: int, album_id: int) -> Genre:
        """Unlink an album from this genre. Unlinking an unlinked album is a no-op."""
        genre = await self.get_genre_by_id(genre_id, with_albums=True)
        album = await self._load_album(album_id)

        if album.remove_genre(genre):
            album.touch()
            await self.db.flush()
            album_genre_links_total.labels(action="removed").inc()
            logger.info("genre_album_unlinked", genre_id=genre_id, album_id=album_id)
        return genre
