from datetime import date

import pytest

from music_library.core.exceptions import BadRequestError
from music_library.services.album_filters import (
    build_album_filters,
    has_genre,
    released_between,
    text_matches,
    title_contains,
)


def test_empty_inputs_produce_no_clauses():
    assert build_album_filters() == []
    assert build_album_filters(q="", title="   ") == []
    assert title_contains(None) is None
    assert text_matches(" ") is None
    assert released_between(None, None) is None
    assert has_genre(None) is None


def test_each_supplied_criterion_adds_a_clause():
    clauses = build_album_filters(q="blue", title="kind", start_year=1950, end_year=1960, genre_id=3)

    assert len(clauses) == 4


def test_year_range_becomes_a_single_between_clause():
    compiled = released_between(1970, 1980).compile()

    assert "BETWEEN" in str(compiled)
    assert sorted(compiled.params.values()) == [date(1970, 1, 1), date(1980, 12, 31)]


def test_same_start_and_end_year_is_allowed():
    assert released_between(1999, 1999) is not None


def test_start_after_end_raises():
    with pytest.raises(BadRequestError):
        released_between(1990, 1980)


def test_text_match_compares_case_folded_keys():
    compiled = text_matches("MILES").compile()

    assert "albums.title_key" in str(compiled)
    assert "artists.name_key" in str(compiled)
    assert set(compiled.params.values()) == {"miles"}
