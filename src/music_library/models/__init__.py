"""Models for the music library."""
from .base import Base, casefold_key
from .album_genre import album_genre
from .artist import Artist
from .genre import Genre
from .album import Album

__all__ = ["Base", "casefold_key", "album_genre", "Artist", "Genre", "Album"]
