"""Artist service for managing music artists."""
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..core.exceptions import DuplicateResourceError, NotFoundError
from ..core.logging import get_logger
from ..metrics import library_entities_created_total, library_entities_deleted_total, library_entities_updated_total
from ..models import Album, Artist, casefold_key
from .pagination import Page, PageRequest, paginate

logger = get_logger(__name__)

ARTIST_SORTABLE = {
    "id": Artist.id,
    "name": Artist.name,
    "created_at": Artist.created_at,
    "updated_at": Artist.updated_at,
}
ARTIST_DEFAULT_SORT = [("name", "asc")]


class ArtistService:
    """Service for managing artists."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def list_artists(self, page_request: PageRequest) -> Page[Artist]:
        """Get one page of artists, sorted by name unless asked otherwise."""
        page = await paginate(self.db, select(Artist), page_request, ARTIST_SORTABLE, Artist.id)
        logger.info("retrieved_artists", count=len(page.content), total=page.total_elements, page=page.number)
        return page

    async def get_artist_by_id(self, artist_id: int) -> Artist:
        """Get an artist by ID, raising NotFoundError if missing."""
        result = await self.db.execute(select(Artist).where(Artist.id == artist_id))
        artist = result.scalar_one_or_none()

        if artist is None:
            logger.warning("artist_not_found", artist_id=artist_id)
            raise NotFoundError(
                message=f"Artist with ID {artist_id} not found",
                details={"artist_id": artist_id},
            )
        return artist

    async def find_by_name(self, name: str) -> Optional[Artist]:
        """Find an artist by name, ignoring case."""
        result = await self.db.execute(select(Artist).where(Artist.name_key == casefold_key(name)))
        return result.scalar_one_or_none()

    async def _ensure_name_available(self, name: str, exclude_id: Optional[int] = None) -> None:
        existing = await self.find_by_name(name)
        if existing is not None and existing.id != exclude_id:
            raise DuplicateResourceError(
                message=f"Artist with name '{name}' already exists",
                details={"name": name, "existing_id": existing.id},
            )

    async def create_artist(self, name: str, bio: Optional[str] = None) -> Artist:
        """Create an artist; names must be unique ignoring case."""
        await self._ensure_name_available(name)

        artist = Artist(name=name, bio=bio)
        self.db.add(artist)
        await self.db.flush()

        library_entities_created_total.labels(entity="artist").inc()
        logger.info("artist_created", artist_id=artist.id, artist_name=artist.name)
        return artist

    async def update_artist(self, artist_id: int, name: str, bio: Optional[str] = None) -> Artist:
        """Replace every field of an artist."""
        artist = await self.get_artist_by_id(artist_id)
        await self._ensure_name_available(name, exclude_id=artist.id)

        artist.name = name
        artist.bio = bio
        artist.touch()
        await self.db.flush()

        library_entities_updated_total.labels(entity="artist").inc()
        logger.info("artist_updated", artist_id=artist.id, artist_name=artist.name)
        return artist

    async def delete_artist(self, artist_id: int) -> None:
        """Delete an artist together with all of their albums."""
        query = select(Artist).where(Artist.id == artist_id)
        query = query.options(selectinload(Artist.albums).selectinload(Album.genres))
        result = await self.db.execute(query)
        artist = result.scalar_one_or_none()

        if artist is None:
            logger.warning("artist_not_found", artist_id=artist_id)
            raise NotFoundError(
                message=f"Artist with ID {artist_id} not found",
                details={"artist_id": artist_id},
            )

        album_count = len(artist.albums)
        await self.db.delete(artist)
        await self.db.flush()

        library_entities_deleted_total.labels(entity="artist").inc()
        logger.info("artist_deleted", artist_id=artist_id, albums_deleted=album_count)

    async def get_albums_for_artist(self, artist_id: int) -> List[Album]:
        """Get all albums by an artist."""
        await self.get_artist_by_id(artist_id)

        query = select(Album).where(Album.artist_id == artist_id).order_by(Album.id)
        query = query.options(selectinload(Album.artist), selectinload(Album.genres))
        result = await self.db.execute(query)
        albums = list(result.scalars().all())

        logger.info("retrieved_albums_by_artist", artist_id=artist_id, count=len(albums))
        return albums
