"""Offset pagination and whitelisted sorting for list queries."""
import math
from dataclasses import dataclass, field
from typing import Any, Generic, List, Mapping, Optional, Sequence, Tuple, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import BadRequestError

T = TypeVar("T")

SortOrder = Tuple[str, str]


@dataclass
class PageRequest:
    """A requested page: 0-based number, size and sort orders."""

    page: int = 0
    size: int = 20
    sort: List[SortOrder] = field(default_factory=list)

    @property
    def offset(self) -> int:
        return self.page * self.size

    @classmethod
    def from_params(
        cls,
        page: int,
        size: int,
        sort: Optional[Sequence[str]] = None,
        default_sort: Optional[Sequence[SortOrder]] = None,
    ) -> "PageRequest":
        """Build a request from ``page``/``size``/``sort`` query parameters.

        Each sort entry is ``field`` or ``field,asc|desc``. When no sort is
        given, ``default_sort`` applies.
        """
        orders = [parse_sort(value) for value in (sort or []) if value and value.strip()]
        if not orders and default_sort:
            orders = list(default_sort)
        return cls(page=page, size=size, sort=orders)


@dataclass
class Page(Generic[T]):
    """One page of results plus the totals needed to navigate."""

    content: List[T]
    number: int
    size: int
    total_elements: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_elements / self.size) if self.size else 0


def parse_sort(value: str) -> SortOrder:
    """Parse ``"name"`` or ``"name,desc"`` into ``("name", "desc")``."""
    parts = [part.strip() for part in value.split(",")]
    field_name = parts[0]
    direction = parts[1].lower() if len(parts) > 1 and parts[1] else "asc"
    if len(parts) > 2 or direction not in ("asc", "desc"):
        raise BadRequestError(
            f"Invalid sort '{value}', expected 'field' or 'field,asc|desc'",
            details={"sort": value},
        )
    return field_name, direction


def apply_sort(query: Select, orders: Sequence[SortOrder], sortable: Mapping[str, Any], tiebreaker: Any) -> Select:
    """Order ``query`` by whitelisted columns, always ending on ``tiebreaker``."""
    clauses = []
    for field_name, direction in orders:
        column = sortable.get(field_name)
        if column is None:
            raise BadRequestError(
                f"Cannot sort by '{field_name}'",
                details={"sort": field_name, "allowed": sorted(sortable)},
            )
        clauses.append(column.desc() if direction == "desc" else column.asc())
    if not any(field_name == "id" for field_name, _ in orders):
        clauses.append(tiebreaker.asc())
    return query.order_by(*clauses)


async def paginate(
    db: AsyncSession,
    query: Select,
    page_request: PageRequest,
    sortable: Mapping[str, Any],
    tiebreaker: Any,
) -> Page:
    """Execute ``query`` for one page and count the full result set."""
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = (await db.execute(count_query)).scalar_one()

    page_query = apply_sort(query, page_request.sort, sortable, tiebreaker)
    page_query = page_query.offset(page_request.offset).limit(page_request.size)
    result = await db.execute(page_query)
    content = list(result.scalars().unique().all())

    return Page(
        content=content,
        number=page_request.page,
        size=page_request.size,
        total_elements=total,
    )
