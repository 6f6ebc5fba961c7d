"""Shared query parameter dependencies, page envelopes and text field helpers."""
from typing import Generic, List, Optional, TypeVar

from fastapi import Query
from pydantic import BaseModel

from ..core.settings import app_settings
from ..services.pagination import Page

T = TypeVar("T")


def not_blank(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


def blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class PageParams:
    """``page``, ``size`` and ``sort`` query parameters for list endpoints."""

    def __init__(
        self,
        page: int = Query(0, ge=0, description="Zero-based page number"),
        size: int = Query(
            app_settings.default_page_size,
            ge=1,
            le=app_settings.max_page_size,
            description="Page size",
        ),
        sort: Optional[List[str]] = Query(
            None,
            description="Sort order as 'field' or 'field,asc|desc'; repeatable",
        ),
    ):
        self.page = page
        self.size = size
        self.sort = sort or []


class PageMetadata(BaseModel):
    """Page position and totals."""
    size: int
    number: int
    total_elements: int
    total_pages: int


class PageResponse(BaseModel, Generic[T]):
    """A page of results."""
    content: List[T]
    page: PageMetadata

    @classmethod
    def from_page(cls, page: Page, item_model) -> "PageResponse":
        return cls(
            content=[item_model.model_validate(item) for item in page.content],
            page=PageMetadata(
                size=page.size,
                number=page.number,
                total_elements=page.total_elements,
                total_pages=page.total_pages,
            ),
        )
