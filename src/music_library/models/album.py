"""Album model."""
from sqlalchemy import Column, Date, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship, validates

from .album_genre import album_genre
from .base import Base, IDMixin, TimestampMixin, casefold_key


class Album(Base, IDMixin, TimestampMixin):
    """Album model; owns the album-genre association."""

    __tablename__ = "albums"

    title = Column(String(255), nullable=False, unique=True)
    release_date = Column(Date, nullable=True, index=True)
    cover_image_url = Column(String(500), nullable=True)
    track_count = Column(Integer, nullable=True)
    catalog_number = Column(String(100), nullable=True, unique=True)
    artist_id = Column(Integer, ForeignKey("artists.id", ondelete="CASCADE"), nullable=False, index=True)

    # Titles are unique regardless of case
    title_key = Column(Text, nullable=False, unique=True)

    # Relationships
    artist = relationship("Artist", back_populates="albums")
    genres = relationship(
        "Genre",
        secondary=album_genre,
        back_populates="albums",
        passive_deletes=True,
        order_by="Genre.name",
    )

    @validates("title")
    def _set_title_key(self, key, value):
        self.title_key = casefold_key(value)
        return value

    @property
    def release_year(self):
        """Year of the release date, or None when the date is unknown."""
        return self.release_date.year if self.release_date else None

    def has_genre(self, genre) -> bool:
        return any(existing.id == genre.id for existing in self.genres)

    def add_genre(self, genre) -> bool:
        """Link a genre; the back-reference keeps ``genre.albums`` in step.

        Returns False when the genre was already linked.
        """
        if self.has_genre(genre):
            return False
        self.genres.append(genre)
        return True

    def remove_genre(self, genre) -> bool:
        """Unlink a genre from both sides. Returns False when it was not linked."""
        for existing in list(self.genres):
            if existing.id == genre.id:
                self.genres.remove(existing)
                return True
        return False

    def __repr__(self) -> str:
        return f"<Album(id={self.id}, title='{self.title}', artist_id={self.artist_id})>"
