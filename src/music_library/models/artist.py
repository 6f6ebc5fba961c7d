"""Artist model."""
from sqlalchemy import Column, String, Text
from sqlalchemy.orm import relationship, validates

from .base import Base, IDMixin, TimestampMixin, casefold_key


class Artist(Base, IDMixin, TimestampMixin):
    """Artist model representing a music artist."""

    __tablename__ = "artists"

    name = Column(String(255), nullable=False, unique=True)
    bio = Column(Text, nullable=True)

    # Names are unique regardless of case
    name_key = Column(Text, nullable=False, unique=True)

    # Relationships
    albums = relationship(
        "Album",
        back_populates="artist",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Album.id",
    )

    @validates("name")
    def _set_name_key(self, key, value):
        self.name_key = casefold_key(value)
        return value

    def __repr__(self) -> str:
        return f"<Artist(id={self.id}, name='{self.name}')>"
