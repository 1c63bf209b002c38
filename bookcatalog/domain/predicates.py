"""
Composable search predicates over Book.

A predicate is a small tree of immutable criterion objects. Every node can
be evaluated in memory with ``matches(book)``; store adapters that have a
native query language walk the same tree and compile it instead (see
``infrastructure/db/sql_predicate_compiler.py``). Nothing here performs I/O.

Usage:
    predicate = build_predicate(BookFilter(title_contains="spring"))
    spring_books = [book for book in books if predicate.matches(book)]
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import FrozenSet, List, Optional, Tuple, Union

from .entities import Book, BookStatus
from .value_objects import BookFilter


@dataclass(frozen=True)
class TitleContains:
    needle: str

    def matches(self, book: Book) -> bool:
        return self.needle.lower() in book.title.lower()


@dataclass(frozen=True)
class AuthorContains:
    needle: str

    def matches(self, book: Book) -> bool:
        return self.needle.lower() in book.author.lower()


@dataclass(frozen=True)
class PriceAtLeast:
    bound: Decimal

    def matches(self, book: Book) -> bool:
        return book.price >= self.bound


@dataclass(frozen=True)
class PriceAtMost:
    bound: Decimal

    def matches(self, book: Book) -> bool:
        return book.price <= self.bound


@dataclass(frozen=True)
class StatusIs:
    status: BookStatus

    def matches(self, book: Book) -> bool:
        return book.status is self.status


@dataclass(frozen=True)
class InAnyCategory:
    """Matches books sharing at least one category with ``category_ids``."""

    category_ids: FrozenSet[int]

    def matches(self, book: Book) -> bool:
        return not self.category_ids.isdisjoint(book.category_ids)


@dataclass(frozen=True)
class AllOf:
    """Logical AND; an empty AllOf matches every book."""

    criteria: Tuple["BookPredicate", ...] = ()

    def matches(self, book: Book) -> bool:
        return all(criterion.matches(book) for criterion in self.criteria)


@dataclass(frozen=True)
class AnyOf:
    """Logical OR; an empty AnyOf matches nothing."""

    criteria: Tuple["BookPredicate", ...] = ()

    def matches(self, book: Book) -> bool:
        return any(criterion.matches(book) for criterion in self.criteria)


BookPredicate = Union[
    TitleContains,
    AuthorContains,
    PriceAtLeast,
    PriceAtMost,
    StatusIs,
    InAnyCategory,
    AllOf,
    AnyOf,
]

MATCH_ALL = AllOf(())


def build_predicate(filters: Optional[BookFilter] = None) -> AllOf:
    """
    Translate a BookFilter into a single AND-composed predicate.

    Only the criteria that are set contribute; an empty or missing filter
    yields MATCH_ALL.

    Args:
        filters: Search criteria, may be None

    Returns:
        An AllOf predicate over the supplied criteria
    """
    if filters is None or filters.is_empty():
        return MATCH_ALL

    criteria: List[BookPredicate] = []

    if filters.title_contains:
        criteria.append(TitleContains(filters.title_contains))

    if filters.author_contains:
        criteria.append(AuthorContains(filters.author_contains))

    if filters.min_price is not None:
        criteria.append(PriceAtLeast(filters.min_price))

    if filters.max_price is not None:
        criteria.append(PriceAtMost(filters.max_price))

    if filters.status is not None:
        criteria.append(StatusIs(filters.status))

    if filters.category_ids:
        criteria.append(InAnyCategory(filters.category_ids))

    return AllOf(tuple(criteria))


def title_or_author_predicate(title: Optional[str], author: Optional[str]) -> AnyOf:
    """
    Keyword search: title substring OR author substring.

    None is treated as the empty string, and the empty string is a
    substring of every title, so a missing keyword matches everything.
    """
    return AnyOf((TitleContains(title or ""), AuthorContains(author or "")))
