"""Album service: CRUD, genre relationship management and search."""
from dataclasses import dataclass, field
from datetime import date
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
from ..models import Album, Artist, Genre, casefold_key
from .album_filters import build_album_filters
from .pagination import Page, PageRequest, paginate

logger = get_logger(__name__)

ALBUM_SORTABLE = {
    "id": Album.id,
    "title": Album.title,
    "release_date": Album.release_date,
    "track_count": Album.track_count,
    "catalog_number": Album.catalog_number,
    "created_at": Album.created_at,
    "updated_at": Album.updated_at,
}
ALBUM_DEFAULT_SORT = [("id", "asc")]


@dataclass
class AlbumData:
    """Field values for creating or fully replacing an album.

    ``genre_ids`` of None means "leave the current genres alone" on update
    and "no genres" on create.
    """

    title: str
    artist_id: int
    release_date: Optional[date] = None
    cover_image_url: Optional[str] = None
    track_count: Optional[int] = None
    catalog_number: Optional[str] = None
    genre_ids: Optional[List[int]] = field(default=None)


class AlbumService:
    """Service for managing albums."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    def _album_query(self):
        return select(Album).options(selectinload(Album.artist), selectinload(Album.genres))

    async def list_albums(self, page_request: PageRequest) -> Page[Album]:
        """Get one page of albums."""
        page = await paginate(self.db, self._album_query(), page_request, ALBUM_SORTABLE, Album.id)
        logger.info("retrieved_albums", count=len(page.content), total=page.total_elements, page=page.number)
        return page

    async def get_album_by_id(self, album_id: int) -> Album:
        """Get an album with its artist and genres, raising NotFoundError if missing."""
        result = await self.db.execute(self._album_query().where(Album.id == album_id))
        album = result.scalar_one_or_none()

        if album is None:
            logger.warning("album_not_found", album_id=album_id)
            raise NotFoundError(
                message=f"Album with ID {album_id} not found",
                details={"album_id": album_id},
            )
        return album

    async def _get_artist(self, artist_id: int) -> Artist:
        artist = await self.db.get(Artist, artist_id)
        if artist is None:
            logger.warning("artist_not_found", artist_id=artist_id)
            raise NotFoundError(
                message=f"Artist with ID {artist_id} not found",
                details={"artist_id": artist_id},
            )
        return artist

    async def _get_genre(self, genre_id: int, with_albums: bool = False) -> Genre:
        query = select(Genre).where(Genre.id == genre_id)
        if with_albums:
            query = query.options(selectinload(Genre.albums))
        genre = (await self.db.execute(query)).scalar_one_or_none()
        if genre is None:
            logger.warning("genre_not_found", genre_id=genre_id)
            raise NotFoundError(
                message=f"Genre with ID {genre_id} not found",
                details={"genre_id": genre_id},
            )
        return genre

    async def _get_genres(self, genre_ids: List[int]) -> List[Genre]:
        """Resolve genre ids in request order, dropping repeats."""
        genres = []
        seen = set()
        for genre_id in genre_ids:
            if genre_id in seen:
                continue
            seen.add(genre_id)
            genres.append(await self._get_genre(genre_id))
        return genres

    async def _ensure_unique(self, data: AlbumData, exclude_id: Optional[int] = None) -> None:
        query = select(Album.id).where(Album.title_key == casefold_key(data.title))
        existing_id = (await self.db.execute(query)).scalars().first()
        if existing_id is not None and existing_id != exclude_id:
            raise DuplicateResourceError(
                message=f"Album with title '{data.title}' already exists",
                details={"title": data.title, "existing_id": existing_id},
            )

        if data.catalog_number:
            query = select(Album.id).where(Album.catalog_number == data.catalog_number)
            existing_id = (await self.db.execute(query)).scalars().first()
            if existing_id is not None and existing_id != exclude_id:
                raise DuplicateResourceError(
                    message=f"Album with catalog number '{data.catalog_number}' already exists",
                    details={"catalog_number": data.catalog_number, "existing_id": existing_id},
                )

    def _apply_fields(self, album: Album, data: AlbumData, artist: Artist) -> None:
        album.title = data.title
        album.release_date = data.release_date
        album.cover_image_url = data.cover_image_url
        album.track_count = data.track_count
        album.catalog_number = data.catalog_number or None
        album.artist = artist

    async def create_album(self, data: AlbumData) -> Album:
        """Create an album for an existing artist, linked to existing genres."""
        await self._ensure_unique(data)
        artist = await self._get_artist(data.artist_id)
        genres = await self._get_genres(data.genre_ids or [])

        album = Album()
        self._apply_fields(album, data, artist)
        album.genres = genres
        self.db.add(album)
        await self.db.flush()

        library_entities_created_total.labels(entity="album").inc()
        logger.info(
            "album_created",
            album_id=album.id,
            album_title=album.title,
            artist_id=artist.id,
            genre_ids=[genre.id for genre in genres],
        )
        return album

    async def update_album(self, album_id: int, data: AlbumData) -> Album:
        """Replace every field of an album.

        Genres are replaced only when ``data.genre_ids`` is not None; an empty
        list clears them.
        """
        album = await self.get_album_by_id(album_id)
        await self._ensure_unique(data, exclude_id=album.id)
        artist = await self._get_artist(data.artist_id)

        self._apply_fields(album, data, artist)
        if data.genre_ids is not None:
            album.genres = await self._get_genres(data.genre_ids)
        album.touch()
        await self.db.flush()

        library_entities_updated_total.labels(entity="album").inc()
        logger.info("album_updated", album_id=album.id, album_title=album.title, artist_id=artist.id)
        return album

    async def delete_album(self, album_id: int) -> None:
        """Delete an album and its genre links."""
        album = await self.get_album_by_id(album_id)
        await self.db.delete(album)
        await self.db.flush()

        library_entities_deleted_total.labels(entity="album").inc()
        logger.info("album_deleted", album_id=album_id)

    async def add_genre(self, album_id: int, genre_id: int) -> Album:
        """Link a genre to an album, updating both sides of the relationship."""
        album = await self.get_album_by_id(album_id)
        genre = await self._get_genre(genre_id, with_albums=True)

        if album.add_genre(genre):
            album.touch()
            await self.db.flush()
            album_genre_links_total.labels(action="added").inc()
            logger.info("album_genre_added", album_id=album_id, genre_id=genre_id)
        else:
            logger.info("album_genre_already_linked", album_id=album_id, genre_id=genre_id)
        return album

    async def remove_genre(self, album_id: int, genre_id: int) -> Album:
        """Unlink a genre from an album on both sides of the relationship."""
        album = await self.get_album_by_id(album_id)
        genre = await self._get_genre(genre_id, with_albums=True)

        if album.remove_genre(genre):
            album.touch()
            await self.db.flush()
            album_genre_links_total.labels(action="removed").inc()
            logger.info("album_genre_removed", album_id=album_id, genre_id=genre_id)
        else:
            logger.info("album_genre_not_linked", album_id=album_id, genre_id=genre_id)
        return album

    async def search(
        self,
        page_request: PageRequest,
        q: Optional[str] = None,
        title: Optional[str] = None,
        start_year: Optional[int] = None,
        end_year: Optional[int] = None,
        genre_id: Optional[int] = None,
    ) -> Page[Album]:
        """Search albums by any combination of criteria.

        Args:
            page_request: Page, size and sort orders
            q: Text matched against the album title or the artist name
            title: Text matched against the album title only
            start_year: Earliest release year (inclusive)
            end_year: Latest release year (inclusive)
            genre_id: Only albums linked to this genre

        Returns:
            Page of matching albums; all albums when no criteria are given
        """
        clauses = build_album_filters(
            q=q,
            title=title,
            start_year=start_year,
            end_year=end_year,
            genre_id=genre_id,
        )
        query = self._album_query()
        if clauses:
            query = query.where(*clauses)
        page = await paginate(self.db, query, page_request, ALBUM_SORTABLE, Album.id)

        logger.info(
            "album_search_completed",
            q=q,
            title=title,
            start_year=start_year,
            end_year=end_year,
            genre_id=genre_id,
            criteria=len(clauses),
            total=page.total_elements,
        )
        return page
