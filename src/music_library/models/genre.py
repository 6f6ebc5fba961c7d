"""Genre model."""
from sqlalchemy import Column, String, Text
from sqlalchemy.orm import relationship, validates

from .album_genre import album_genre
from .base import Base, IDMixin, TimestampMixin, casefold_key


class Genre(Base, IDMixin, TimestampMixin):
    """Genre model; the inverse side of the album-genre association."""

    __tablename__ = "genres"

    name = Column(String(100), nullable=False, unique=True)
    description = Column(Text, nullable=True)

    name_key = Column(Text, nullable=False, unique=True)

    albums = relationship(
        "Album",
        secondary=album_genre,
        back_populates="genres",
        passive_deletes=True,
        order_by="Album.id",
    )

    @validates("name")
    def _set_name_key(self, key, value):
        self.name_key = casefold_key(value)
        return value

    def __repr__(self) -> str:
        return f"<Genre(id={self.id}, name='{self.name}')>"
