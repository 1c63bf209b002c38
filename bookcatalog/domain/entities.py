"""
Domain entities for the book catalog.

Entities are objects with a unique identity that runs through time and
different representations. Both entities validate their fields on
construction, so an invalid Book or Category can never reach a store.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import FrozenSet, Iterable, Optional

from .errors import InvalidField

TITLE_MAX_LENGTH = 200
AUTHOR_MAX_LENGTH = 100
ISBN_MIN_LENGTH = 10
ISBN_MAX_LENGTH = 17
CATEGORY_DESCRIPTION_MAX_LENGTH = 500


class BookStatus(str, Enum):
    """Availability status of a book in the catalog."""

    AVAILABLE = "AVAILABLE"
    UNAVAILABLE = "UNAVAILABLE"
    DISCONTINUED = "DISCONTINUED"

    def can_transition_to(self, target: "BookStatus") -> bool:
        """
        Check whether a book in this status may move to ``target``.

        Only DISCONTINUED -> AVAILABLE is forbidden; every other move,
        including staying in place, is allowed.
        """
        return not (self is BookStatus.DISCONTINUED and target is BookStatus.AVAILABLE)


def _require_text(field_name: str, value: Optional[str], max_length: int) -> None:
    if value is None or not value.strip():
        raise InvalidField(field_name, f"Book {field_name} cannot be empty")
    if len(value) > max_length:
        raise InvalidField(
            field_name,
            f"Book {field_name} cannot exceed {max_length} characters, got {len(value)}",
        )


def to_decimal(value, field_name: str = "price") -> Decimal:
    """Coerce ints, floats and numeric strings to an exact, finite Decimal."""
    if value is None or isinstance(value, bool):
        raise InvalidField(field_name, f"{field_name} must be a number, got {value!r}")
    try:
        # str() first so that 45.99 stays 45.99 instead of its binary expansion
        number = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        raise InvalidField(field_name, f"{field_name} must be a number, got {value!r}")
    if not number.is_finite():
        raise InvalidField(field_name, f"{field_name} must be a finite number, got {value!r}")
    return number


@dataclass
class Category:
    """
    A named grouping of books.

    A category does not know its books; the reverse view is always queried
    from the book store.
    """

    name: str
    """Unique category name"""

    description: Optional[str] = None
    """Free-text description, at most 500 characters"""

    id: Optional[int] = None
    """Assigned by the store on first save"""

    def __post_init__(self) -> None:
        """Validate category data."""
        if self.name is None or not self.name.strip():
            raise InvalidField("name", "Category name cannot be empty")

        if self.description is not None and len(self.description) > CATEGORY_DESCRIPTION_MAX_LENGTH:
            raise InvalidField(
                "description",
                f"Category description cannot exceed {CATEGORY_DESCRIPTION_MAX_LENGTH} characters",
            )

    def __eq__(self, other: object) -> bool:
        """Two categories are equal if they have the same ID."""
        if not isinstance(other, Category):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on category ID."""
        return hash(self.id)


@dataclass
class Book:
    """
    Represents a book in the catalog.

    A book references its categories by id only. Updates never mutate a
    stored Book in place: the lifecycle service builds a new instance with
    ``dataclasses.replace``, which re-runs the validation below.
    """

    title: str
    author: str
    price: Decimal
    isbn: str
    publish_date: Optional[date] = None
    status: BookStatus = BookStatus.AVAILABLE
    category_ids: FrozenSet[int] = field(default_factory=frozenset)

    id: Optional[int] = None
    """Assigned by the store on first save, immutable afterwards"""

    def __post_init__(self) -> None:
        """Validate book data and normalize field types."""
        _require_text("title", self.title, TITLE_MAX_LENGTH)
        _require_text("author", self.author, AUTHOR_MAX_LENGTH)

        self.price = to_decimal(self.price)
        if self.price < 0:
            raise InvalidField("price", f"Book price must be a non-negative number, got {self.price}")

        if self.isbn is None or not (ISBN_MIN_LENGTH <= len(self.isbn) <= ISBN_MAX_LENGTH):
            raise InvalidField(
                "isbn",
                f"ISBN must be between {ISBN_MIN_LENGTH} and {ISBN_MAX_LENGTH} characters, "
                f"got {self.isbn!r}",
            )

        try:
            self.status = BookStatus(self.status)
        except ValueError:
            raise InvalidField("status", f"Unknown book status: {self.status!r}")

        self.category_ids = frozenset(self.category_ids or ())

    @staticmethod
    def create_new(
        title: str,
        author: str,
        price: Decimal,
        isbn: str,
        publish_date: Optional[date] = None,
        category_ids: Iterable[int] = (),
    ) -> "Book":
        """
        Factory method for a book that has not been stored yet.

        New books always start AVAILABLE.
        """
        return Book(
            title=title,
            author=author,
            price=price,
            isbn=isbn,
            publish_date=publish_date,
            status=BookStatus.AVAILABLE,
            category_ids=frozenset(category_ids),
        )

    def is_available(self) -> bool:
        """Check if the book is currently available."""
        return self.status is BookStatus.AVAILABLE
