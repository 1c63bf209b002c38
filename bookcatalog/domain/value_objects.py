"""
Value objects for the domain layer.

Value objects are immutable objects that represent descriptive aspects
of the domain with no conceptual identity: the search filter, the
create/update payloads and the paging request/response.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from math import ceil
from typing import FrozenSet, Generic, List, Optional, TypeVar

from .entities import BookStatus, to_decimal
from .errors import InvalidField, InvalidParameter

T = TypeVar("T")

SORTABLE_FIELDS = ("id", "title", "author", "price", "publish_date")
MAX_PAGE_SIZE = 100


def _price_bound(value, name: str) -> Optional[Decimal]:
    if value is None:
        return None
    try:
        return to_decimal(value, name)
    except InvalidField as e:
        raise InvalidParameter(e.message, parameter=name) from e


@dataclass(frozen=True)
class BookFilter:
    """
    Structured search criteria.

    All filters are optional. When a filter is None (or an empty string /
    empty set), it means "no restriction". The filter does not check that
    min_price <= max_price; an inverted range simply matches nothing.
    """

    title_contains: Optional[str] = None
    """Case-insensitive substring of the title"""

    author_contains: Optional[str] = None
    """Case-insensitive substring of the author"""

    min_price: Optional[Decimal] = None
    """Inclusive lower price bound"""

    max_price: Optional[Decimal] = None
    """Inclusive upper price bound"""

    status: Optional[BookStatus] = None
    """Exact status match"""

    category_ids: FrozenSet[int] = field(default_factory=frozenset)
    """Book matches if it belongs to at least one of these categories"""

    def __post_init__(self) -> None:
        """Normalize numeric and collection fields."""
        object.__setattr__(self, "min_price", _price_bound(self.min_price, "min_price"))
        object.__setattr__(self, "max_price", _price_bound(self.max_price, "max_price"))
        object.__setattr__(self, "category_ids", frozenset(self.category_ids or ()))
        if self.status is not None:
            try:
                object.__setattr__(self, "status", BookStatus(self.status))
            except ValueError:
                raise InvalidParameter(f"Unknown book status: {self.status!r}", parameter="status")

    def is_empty(self) -> bool:
        """Check if no filters are set."""
        return (
            not self.title_contains
            and not self.author_contains
            and self.min_price is None
            and self.max_price is None
            and self.status is None
            and not self.category_ids
        )


@dataclass(frozen=True)
class BookDraft:
    """
    Input for creating a book.

    ``status`` is accepted for symmetry with the update payload but is
    ignored: new books always start AVAILABLE.
    """

    title: str
    author: str
    price: Decimal
    isbn: str
    publish_date: Optional[date] = None
    status: Optional[BookStatus] = None
    category_ids: FrozenSet[int] = field(default_factory=frozenset)


@dataclass(frozen=True)
class BookPatch:
    """
    Partial update for a book.

    A None field is left untouched. ``category_ids`` follows the same rule
    for the empty set: an empty set keeps the current categories, use
    the explicit clear-categories operation to remove them all.
    """

    title: Optional[str] = None
    author: Optional[str] = None
    price: Optional[Decimal] = None
    publish_date: Optional[date] = None
    isbn: Optional[str] = None
    status: Optional[BookStatus] = None
    category_ids: Optional[FrozenSet[int]] = None

    def is_empty(self) -> bool:
        """Check if the patch changes nothing."""
        return (
            self.title is None
            and self.author is None
            and self.price is None
            and self.publish_date is None
            and self.isbn is None
            and self.status is None
            and not self.category_ids
        )


@dataclass(frozen=True)
class CategoryDraft:
    """Input for creating a category."""

    name: str
    description: Optional[str] = None


@dataclass(frozen=True)
class PageRequest:
    """A page of results: 0-based page index, page size and ordering."""

    page: int = 0
    size: int = 20
    sort_by: str = "id"
    descending: bool = False

    def __post_init__(self) -> None:
        """Validate paging constraints."""
        if self.page < 0:
            raise InvalidParameter(f"page must be >= 0, got {self.page}", parameter="page")

        if not (1 <= self.size <= MAX_PAGE_SIZE):
            raise InvalidParameter(
                f"size must be between 1 and {MAX_PAGE_SIZE}, got {self.size}",
                parameter="size",
            )

        if self.sort_by not in SORTABLE_FIELDS:
            raise InvalidParameter(
                f"sort_by must be one of {SORTABLE_FIELDS}, got '{self.sort_by}'",
                parameter="sort_by",
            )

    @property
    def offset(self) -> int:
        """Number of items skipped before this page."""
        return self.page * self.size


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of query results plus the total match count."""

    items: List[T]
    total: int
    page: int
    size: int

    @property
    def total_pages(self) -> int:
        """Number of pages needed to hold every matching item."""
        return ceil(self.total / self.size) if self.size else 0

    def has_next(self) -> bool:
        """Check if a later page holds more items."""
        return self.page + 1 < self.total_pages
