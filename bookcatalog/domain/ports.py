"""
Port interfaces (protocols) for the domain layer.

Ports define the contracts between the domain and infrastructure layers.
They are implemented by adapters in the infrastructure layer, allowing
the domain to remain independent of technical details.

Following Hexagonal Architecture principles, the domain layer depends only
on these abstract protocols, never on concrete implementations.
"""

from typing import Iterable, List, Optional, Protocol

from .entities import Book, Category
from .predicates import BookPredicate
from .value_objects import Page, PageRequest


class BookRepository(Protocol):
    """
    Port for persisting and querying books.

    Implementations own the book -> category links. The reverse view
    (which books belong to a category) is only ever derived by querying
    this repository.
    """

    def get_by_id(self, book_id: int) -> Optional[Book]:
        """
        Retrieve a book by its identifier.

        Returns:
            The Book entity if found, None otherwise
        """
        ...

    def exists_by_isbn(self, isbn: str) -> bool:
        """Check whether any stored book uses this ISBN."""
        ...

    def save(self, book: Book) -> Book:
        """
        Insert or update a book together with its category links.

        A book without id is inserted and the store assigns one; a book with
        an id replaces the stored row.

        Returns:
            The persisted copy, with ``id`` set

        Raises:
            DuplicateIsbn: If the store's own uniqueness constraint fires
        """
        ...

    def delete(self, book_id: int) -> bool:
        """
        Delete a book and its category links.

        Returns:
            True if the book was deleted, False if not found
        """
        ...

    def query(self, predicate: BookPredicate) -> List[Book]:
        """Return every book matching the predicate, ordered by id."""
        ...

    def query_page(self, predicate: BookPredicate, page: PageRequest) -> Page[Book]:
        """Return one sorted page of the books matching the predicate."""
        ...

    def count_referencing_category(self, category_id: int) -> int:
        """Count the books linked to a category."""
        ...

    def count(self) -> int:
        """Get the total number of books in the catalog."""
        ...


class CategoryRepository(Protocol):
    """Port for persisting and retrieving categories."""

    def get_by_id(self, category_id: int) -> Optional[Category]:
        ...

    def find_all_by_ids(self, category_ids: Iterable[int]) -> List[Category]:
        """
        Batch lookup.

        Unknown ids are silently absent from the result; callers compare
        the returned ids against what they asked for.
        """
        ...

    def exists_by_name(self, name: str) -> bool:
        ...

    def save(self, category: Category) -> Category:
        """Insert or update a category, returning the copy with ``id`` set."""
        ...

    def delete(self, category_id: int) -> bool:
        """
        Delete a category.

        Returns:
            True if the category was deleted, False if not found
        """
        ...

    def get_all(self) -> List[Category]:
        """Retrieve all categories ordered by id."""
        ...
