"""Services for the music library."""
from .album_service import AlbumData, AlbumService
from .artist_service import ArtistService
from .genre_service import GenreService
from .reset_service import DatabaseResetService

__all__ = ["AlbumData", "AlbumService", "ArtistService", "GenreService", "DatabaseResetService"]
