"""Album-genre join table."""
from sqlalchemy import Column, ForeignKey, Integer, Table

from .base import Base

album_genre = Table(
    "album_genre",
    Base.metadata,
    Column("album_id", Integer, ForeignKey("albums.id", ondelete="CASCADE"), primary_key=True),
    Column("genre_id", Integer, ForeignKey("genres.id", ondelete="CASCADE"), primary_key=True, index=True),
)
