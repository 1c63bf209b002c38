"""
In-memory implementations of the catalog ports.

Predicates are evaluated directly with ``matches()``. Useful for tests and
for running the API without a database (``CATALOG_STORE=memory``). State
lives for the lifetime of the repository object only.
"""

import dataclasses
from typing import Dict, Iterable, List, Optional

from bookcatalog.domain.entities import Book, Category
from bookcatalog.domain.errors import DuplicateCategoryName, DuplicateIsbn
from bookcatalog.domain.ports import BookRepository, CategoryRepository
from bookcatalog.domain.predicates import BookPredicate
from bookcatalog.domain.value_objects import Page, PageRequest


def _sort_key(sort_by: str):
    if sort_by in ("title", "author"):
        return lambda book: (getattr(book, sort_by).lower(), book.id)
    if sort_by == "publish_date":
        # NULL dates sort first, matching SQLite
        return lambda book: (book.publish_date is not None, book.publish_date, book.id)
    return lambda book: (getattr(book, sort_by), book.id)


class InMemoryBookRepository(BookRepository):
    """Dict-backed book store with store-assigned integer ids."""

    def __init__(self, initial_books: Optional[Iterable[Book]] = None) -> None:
        self._books: Dict[int, Book] = {}
        self._last_id = 0
        for book in initial_books or ():
            self.save(book)

    def get_by_id(self, book_id: int) -> Optional[Book]:
        return self._books.get(book_id)

    def exists_by_isbn(self, isbn: str) -> bool:
        return any(book.isbn == isbn for book in self._books.values())

    def save(self, book: Book) -> Book:
        clash = next(
            (b for b in self._books.values() if b.isbn == book.isbn and b.id != book.id),
            None,
        )
        if clash is not None:
            raise DuplicateIsbn(book.isbn)

        if book.id is None:
            self._last_id += 1
            book = dataclasses.replace(book, id=self._last_id)
        self._last_id = max(self._last_id, book.id)
        self._books[book.id] = book
        return book

    def delete(self, book_id: int) -> bool:
        return self._books.pop(book_id, None) is not None

    def query(self, predicate: BookPredicate) -> List[Book]:
        return [
            book for _, book in sorted(self._books.items()) if predicate.matches(book)
        ]

    def query_page(self, predicate: BookPredicate, page: PageRequest) -> Page[Book]:
        matches = sorted(
            self.query(predicate), key=_sort_key(page.sort_by), reverse=page.descending
        )
        items = matches[page.offset:page.offset + page.size]
        return Page(items=items, total=len(matches), page=page.page, size=page.size)

    def count_referencing_category(self, category_id: int) -> int:
        return sum(1 for book in self._books.values() if category_id in book.category_ids)

    def count(self) -> int:
        return len(self._books)


class InMemoryCategoryRepository(CategoryRepository):
    """Dict-backed category store with store-assigned integer ids."""

    def __init__(self, initial_categories: Optional[Iterable[Category]] = None) -> None:
        self._categories: Dict[int, Category] = {}
        self._last_id = 0
        for category in initial_categories or ():
            self.save(category)

    def get_by_id(self, category_id: int) -> Optional[Category]:
        return self._categories.get(category_id)

    def find_all_by_ids(self, category_ids: Iterable[int]) -> List[Category]:
        return [
            self._categories[category_id]
            for category_id in sorted(set(category_ids))
            if category_id in self._categories
        ]

    def exists_by_name(self, name: str) -> bool:
        return any(category.name == name for category in self._categories.values())

    def save(self, category: Category) -> Category:
        if any(
            c.name == category.name and c.id != category.id
            for c in self._categories.values()
        ):
            raise DuplicateCategoryName(category.name)

        if category.id is None:
            self._last_id += 1
            category = dataclasses.replace(category, id=self._last_id)
        self._last_id = max(self._last_id, category.id)
        self._categories[category.id] = category
        return category

    def delete(self, category_id: int) -> bool:
        return self._categories.pop(category_id, None) is not None

    def get_all(self) -> List[Category]:
        return [category for _, category in sorted(self._categories.items())]
