"""Composable filter predicates for album queries.

Each factory returns a SQLAlchemy boolean clause, or ``None`` when its input
is empty so that callers can simply drop it. :func:`build_album_filters`
combines whichever criteria were supplied.

Example::

    clauses = build_album_filters(title="rock", start_year=1970, end_year=1980)
    query = select(Album).where(*clauses)
"""
from datetime import date
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.sql.elements import ColumnElement

from ..core.exceptions import BadRequestError
from ..models import Album, Artist, Genre, casefold_key


def _clean(term: Optional[str]) -> Optional[str]:
    if term is None:
        return None
    term = term.strip()
    return term or None


def title_contains(term: Optional[str]) -> Optional[ColumnElement[bool]]:
    """Albums whose title contains ``term``, ignoring case."""
    term = _clean(term)
    if term is None:
        return None
    return Album.title_key.contains(casefold_key(term), autoescape=True)


def text_matches(term: Optional[str]) -> Optional[ColumnElement[bool]]:
    """Albums whose title or artist name contains ``term``, ignoring case."""
    term = _clean(term)
    if term is None:
        return None
    term = casefold_key(term)
    return or_(
        Album.title_key.contains(term, autoescape=True),
        Album.artist.has(Artist.name_key.contains(term, autoescape=True)),
    )


def released_between(start_year: Optional[int], end_year: Optional[int]) -> Optional[ColumnElement[bool]]:
    """Albums released within the inclusive year range.

    Either bound may be None for an open-ended range; both None means no
    filtering. Albums without a release date never match.
    """
    if start_year is None and end_year is None:
        return None
    if start_year is not None and end_year is not None:
        if start_year > end_year:
            raise BadRequestError(
                f"start_year ({start_year}) must not be after end_year ({end_year})",
                details={"start_year": start_year, "end_year": end_year},
            )
        return Album.release_date.between(date(start_year, 1, 1), date(end_year, 12, 31))
    if start_year is not None:
        return Album.release_date >= date(start_year, 1, 1)
    return Album.release_date <= date(end_year, 12, 31)


def has_genre(genre_id: Optional[int]) -> Optional[ColumnElement[bool]]:
    """Albums linked to the given genre."""
    if genre_id is None:
        return None
    # EXISTS keeps one row per album, unlike a join
    return Album.genres.any(Genre.id == genre_id)


def build_album_filters(
    q: Optional[str] = None,
    title: Optional[str] = None,
    start_year: Optional[int] = None,
    end_year: Optional[int] = None,
    genre_id: Optional[int] = None,
) -> List[ColumnElement[bool]]:
    """Collect the clauses for every supplied criterion; AND them with ``where(*clauses)``."""
    candidates = [
        text_matches(q),
        title_contains(title),
        released_between(start_year, end_year),
        has_genre(genre_id),
    ]
    return [clause for clause in candidates if clause is not None]
