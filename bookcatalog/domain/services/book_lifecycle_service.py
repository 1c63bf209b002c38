"""
Domain service for the book and category lifecycle.

This service is the only entry point that mutates the catalog. It applies
the catalog's business rules before anything is written:

1. ISBN uniqueness on create and on update when the ISBN changes
2. Category references must exist (via CategoryResolver)
3. Status transitions must be legal (DISCONTINUED never returns to AVAILABLE)
4. A category can only be deleted once no book references it

Every check runs before the first persistence call of an operation, so a
failed call leaves the store untouched. Atomicity of the persistence call
itself is the store's concern.

The service depends only on ports; wiring to SQLite or the in-memory
store happens in ``bookcatalog.api.v1.dependencies``.
"""

import dataclasses
import logging
from decimal import Decimal
from typing import List, Optional

from bookcatalog.domain.entities import Book, BookStatus, Category, to_decimal
from bookcatalog.domain.errors import (
    BookNotFound,
    CategoryHasAssociatedBooks,
    CategoryNotFound,
    DuplicateCategoryName,
    DuplicateIsbn,
    InvalidField,
    InvalidParameter,
    InvalidStatusTransition,
)
from bookcatalog.domain.ports import BookRepository, CategoryRepository
from bookcatalog.domain.predicates import (
    AllOf,
    AuthorContains,
    InAnyCategory,
    StatusIs,
    build_predicate,
    title_or_author_predicate,
)
from bookcatalog.domain.services.category_resolver import CategoryResolver
from bookcatalog.domain.value_objects import (
    BookDraft,
    BookFilter,
    BookPatch,
    CategoryDraft,
    Page,
    PageRequest,
)

logger = logging.getLogger(__name__)


class BookLifecycleService:
    """
    Orchestrates create/update/delete and the catalog queries.

    Usage:
        service = BookLifecycleService(
            book_repo=SqliteBookRepository(db_path),
            category_repo=SqliteCategoryRepository(db_path),
        )
        book = service.create_book(BookDraft(title=..., author=..., price=..., isbn=...))
        service.update_book(book.id, BookPatch(status=BookStatus.UNAVAILABLE))
    """

    def __init__(
        self,
        book_repo: BookRepository,
        category_repo: CategoryRepository,
        category_resolver: Optional[CategoryResolver] = None,
    ) -> None:
        """
        Initialize the service with its stores.

        Args:
            book_repo: Store for Book entities and their category links
            category_repo: Store for Category entities
            category_resolver: Optional resolver override; defaults to one
                built over ``category_repo``
        """
        self._book_repo = book_repo
        self._category_repo = category_repo
        self._category_resolver = category_resolver or CategoryResolver(category_repo)

    # ------------------------------------------------------------------
    # Books: commands
    # ------------------------------------------------------------------

    def create_book(self, draft: BookDraft) -> Book:
        """
        Create a new book.

        Any status in the draft is ignored; the new book is AVAILABLE.

        Raises:
            InvalidField: If a field violates its constraints
            DuplicateIsbn: If the ISBN is already used
            CategoryNotFound: If any category id is unknown
        """
        book = Book.create_new(
            title=draft.title,
            author=draft.author,
            price=draft.price,
            isbn=draft.isbn,
            publish_date=draft.publish_date,
            category_ids=draft.category_ids,
        )

        if self._book_repo.exists_by_isbn(book.isbn):
            logger.warning(f"Rejected create: ISBN {book.isbn} already exists")
            raise DuplicateIsbn(book.isbn)

        self._category_resolver.resolve(book.category_ids)

        saved = self._book_repo.save(book)
        logger.info(f"Created book {saved.id} ('{saved.title}', ISBN {saved.isbn})")
        return saved

    def update_book(self, book_id: int, patch: BookPatch) -> Book:
        """
        Apply a partial update to a book.

        Only fields present in the patch change. A non-empty ``category_ids``
        replaces the whole category set; an empty one leaves it alone.

        Raises:
            BookNotFound: If the book does not exist
            DuplicateIsbn: If the new ISBN belongs to another book
            InvalidStatusTransition: On DISCONTINUED -> AVAILABLE
            CategoryNotFound: If any new category id is unknown
            InvalidField: If the merged book violates a field constraint
        """
        existing = self.get_book(book_id)
        changes = {}

        for name in ("title", "author", "price", "publish_date"):
            value = getattr(patch, name)
            if value is not None:
                changes[name] = value

        if patch.isbn is not None and patch.isbn != existing.isbn:
            if self._book_repo.exists_by_isbn(patch.isbn):
                logger.warning(f"Rejected update of book {book_id}: ISBN {patch.isbn} taken")
                raise DuplicateIsbn(patch.isbn)
            changes["isbn"] = patch.isbn

        if patch.status is not None:
            requested = self._parse_status(patch.status)
            if requested is not existing.status:
                if not existing.status.can_transition_to(requested):
                    logger.warning(
                        f"Rejected update of book {book_id}: "
                        f"{existing.status.value} -> {requested.value}"
                    )
                    raise InvalidStatusTransition(existing.status.value, requested.value)
                changes["status"] = requested

        if patch.category_ids:
            resolved = self._category_resolver.resolve(patch.category_ids)
            changes["category_ids"] = frozenset(resolved)

        if not changes:
            logger.debug(f"Update of book {book_id} changes nothing")
            return existing

        updated = dataclasses.replace(existing, **changes)
        saved = self._book_repo.save(updated)
        logger.info(f"Updated book {book_id}: {sorted(changes)}")
        return saved

    def clear_categories(self, book_id: int) -> Book:
        """
        Remove every category from a book.

        Raises:
            BookNotFound: If the book does not exist
        """
        existing = self.get_book(book_id)
        if not existing.category_ids:
            return existing

        saved = self._book_repo.save(dataclasses.replace(existing, category_ids=frozenset()))
        logger.info(f"Cleared categories of book {book_id}")
        return saved

    def delete_book(self, book_id: int) -> None:
        """
        Delete a book and its category links.

        Raises:
            BookNotFound: If the book does not exist
        """
        if not self._book_repo.delete(book_id):
            raise BookNotFound(book_id)
        logger.info(f"Deleted book {book_id}")

    # ------------------------------------------------------------------
    # Books: queries
    # ------------------------------------------------------------------

    def get_book(self, book_id: int) -> Book:
        book = self._book_repo.get_by_id(book_id)
        if book is None:
            raise BookNotFound(book_id)
        return book

    def list_books(self) -> List[Book]:
        return self._book_repo.query(build_predicate())

    def list_books_page(self, page: PageRequest) -> Page[Book]:
        return self._book_repo.query_page(build_predicate(), page)

    def search(self, filters: Optional[BookFilter] = None) -> List[Book]:
        """
        Structured search: every supplied criterion must hold.

        An empty or missing filter returns the whole catalog.
        """
        predicate = build_predicate(filters)
        logger.debug(f"Searching books with {predicate}")
        return self._book_repo.query(predicate)

    def search_page(self, filters: Optional[BookFilter], page: PageRequest) -> Page[Book]:
        return self._book_repo.query_page(build_predicate(filters), page)

    def search_by_title_or_author(
        self, title: Optional[str] = None, author: Optional[str] = None
    ) -> List[Book]:
        """
        Keyword search: title contains ``title`` OR author contains ``author``.

        Missing keywords count as the empty string.
        """
        return self._book_repo.query(title_or_author_predicate(title, author))

    def by_price_range(self, min_price, max_price) -> List[Book]:
        """
        Books whose price lies in [min_price, max_price].

        Raises:
            InvalidParameter: If a bound is missing or min_price > max_price
        """
        if min_price is None or max_price is None:
            raise InvalidParameter("Both min_price and max_price are required", parameter="price")

        low = self._parse_price(min_price, "min_price")
        high = self._parse_price(max_price, "max_price")
        if low > high:
            raise InvalidParameter(
                f"min_price ({low}) cannot be greater than max_price ({high})",
                parameter="price",
            )

        return self._book_repo.query(build_predicate(BookFilter(min_price=low, max_price=high)))

    def by_category(self, category_id: int) -> List[Book]:
        """
        Books that belong to a category.

        Raises:
            CategoryNotFound: If the category does not exist
        """
        self.get_category(category_id)
        return self._book_repo.query(AllOf((InAnyCategory(frozenset({category_id})),)))

    def by_author(self, author: Optional[str]) -> List[Book]:
        """
        Books whose author contains the trimmed name, ignoring case.

        Raises:
            InvalidParameter: If the name is missing or blank
        """
        if author is None or not author.strip():
            raise InvalidParameter("Author name cannot be empty", parameter="author")
        return self._book_repo.query(AllOf((AuthorContains(author.strip()),)))

    def available_books(self) -> List[Book]:
        return self._book_repo.query(AllOf((StatusIs(BookStatus.AVAILABLE),)))

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def create_category(self, draft: CategoryDraft) -> Category:
        """
        Create a category with a unique name.

        Raises:
            InvalidField: If name or description violate their constraints
            DuplicateCategoryName: If the name is already used
        """
        category = Category(name=draft.name, description=draft.description)

        if self._category_repo.exists_by_name(category.name):
            raise DuplicateCategoryName(category.name)

        saved = self._category_repo.save(category)
        logger.info(f"Created category {saved.id} ('{saved.name}')")
        return saved

    def get_category(self, category_id: int) -> Category:
        category = self._category_repo.get_by_id(category_id)
        if category is None:
            raise CategoryNotFound([category_id])
        return category

    def list_categories(self) -> List[Category]:
        return self._category_repo.get_all()

    def delete_category(self, category_id: int) -> None:
        """
        Delete a category that no book references.

        Raises:
            CategoryNotFound: If the category does not exist
            CategoryHasAssociatedBooks: If any book still references it
        """
        self.get_category(category_id)

        book_count = self._book_repo.count_referencing_category(category_id)
        if book_count:
            logger.warning(f"Rejected delete of category {category_id}: {book_count} book(s) linked")
            raise CategoryHasAssociatedBooks(category_id, book_count)

        self._category_repo.delete(category_id)
        logger.info(f"Deleted category {category_id}")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_status(value) -> BookStatus:
        try:
            return BookStatus(value)
        except ValueError:
            raise InvalidField("status", f"Unknown book status: {value!r}")

    @staticmethod
    def _parse_price(value, name: str) -> Decimal:
        try:
            return to_decimal(value, name)
        except InvalidField as e:
            raise InvalidParameter(e.message, parameter=name) from e
