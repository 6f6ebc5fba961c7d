import pytest

from music_library.core.exceptions import BadRequestError
from music_library.services.pagination import Page, PageRequest, parse_sort


class TestParseSort:

    def test_field_only_defaults_to_ascending(self):
        assert parse_sort("name") == ("name", "asc")

    def test_direction_is_case_insensitive(self):
        assert parse_sort("title,DESC") == ("title", "desc")
        assert parse_sort(" title , asc ") == ("title", "asc")

    @pytest.mark.parametrize("value", ["name,sideways", "name,asc,extra"])
    def test_invalid_values(self, value):
        with pytest.raises(BadRequestError):
            parse_sort(value)


class TestPageRequest:

    def test_default_sort_applies_when_none_given(self):
        request = PageRequest.from_params(0, 20, None, default_sort=[("name", "asc")])
        assert request.sort == [("name", "asc")]

        request = PageRequest.from_params(0, 20, ["", "  "], default_sort=[("name", "asc")])
        assert request.sort == [("name", "asc")]

    def test_explicit_sort_replaces_default(self):
        request = PageRequest.from_params(2, 10, ["title,desc", "id"], default_sort=[("name", "asc")])

        assert request.sort == [("title", "desc"), ("id", "asc")]
        assert request.offset == 20


class TestPage:

    @pytest.mark.parametrize(
        "total, size, pages",
        [(0, 20, 0), (1, 20, 1), (20, 20, 1), (21, 20, 2), (5, 2, 3)],
    )
    def test_total_pages(self, total, size, pages):
        page = Page(content=[], number=0, size=size, total_elements=total)

        assert page.total_pages == pages
