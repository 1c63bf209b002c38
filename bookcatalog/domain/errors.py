"""
Business errors for the book catalog.

Every failure the domain detects is raised as a subclass of CatalogError
carrying a stable code, a human message and a context dict with the data
the caller needs (missing ids, counts, offending field). The HTTP adapter
maps these to responses through a single exception handler; the domain
itself never catches them.
"""

from enum import Enum
from typing import Any, Dict, Iterable, List, Optional


class ErrorCode(str, Enum):
    """Stable error codes exposed to callers."""

    BOOK_NOT_FOUND = "BOOK_NOT_FOUND"
    CATEGORY_NOT_FOUND = "CATEGORY_NOT_FOUND"
    DUPLICATE_ISBN = "DUPLICATE_ISBN"
    INVALID_STATUS_TRANSITION = "INVALID_STATUS_TRANSITION"
    CATEGORY_HAS_ASSOCIATED_BOOKS = "CATEGORY_HAS_ASSOCIATED_BOOKS"
    INVALID_PARAMETER = "INVALID_PARAMETER"
    INVALID_FIELD = "INVALID_FIELD"
    DUPLICATE_CATEGORY_NAME = "DUPLICATE_CATEGORY_NAME"


class CatalogError(Exception):
    """Base exception for all catalog business errors."""

    code: ErrorCode
    http_status: int = 400

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context or {}

    def to_response(self) -> dict:
        """Convert to the REST error envelope."""
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "context": self.context,
            }
        }


# ─── Not found (404) ─────────────────────────────────────────────


class BookNotFound(CatalogError):
    code = ErrorCode.BOOK_NOT_FOUND
    http_status = 404

    def __init__(self, book_id: int) -> None:
        super().__init__(f"Book not found, id: {book_id}", {"book_id": book_id})
        self.book_id = book_id


class CategoryNotFound(CatalogError):
    """One or more category ids do not exist; ``missing_ids`` is sorted."""

    code = ErrorCode.CATEGORY_NOT_FOUND
    http_status = 404

    def __init__(self, missing_ids: Iterable[int]) -> None:
        self.missing_ids: List[int] = sorted(set(missing_ids))
        super().__init__(
            f"Category not found, ids: {self.missing_ids}",
            {"missing_ids": self.missing_ids},
        )


# ─── Conflicts (409) ─────────────────────────────────────────────


class DuplicateIsbn(CatalogError):
    code = ErrorCode.DUPLICATE_ISBN
    http_status = 409

    def __init__(self, isbn: str) -> None:
        super().__init__(f"ISBN already in use by another book: {isbn}", {"isbn": isbn})
        self.isbn = isbn


class InvalidStatusTransition(CatalogError):
    code = ErrorCode.INVALID_STATUS_TRANSITION
    http_status = 409

    def __init__(self, current: str, requested: str) -> None:
        super().__init__(
            f"Cannot change book status from {current} to {requested}",
            {"current": current, "requested": requested},
        )
        self.current = current
        self.requested = requested


class CategoryHasAssociatedBooks(CatalogError):
    code = ErrorCode.CATEGORY_HAS_ASSOCIATED_BOOKS
    http_status = 409

    def __init__(self, category_id: int, book_count: int) -> None:
        super().__init__(
            f"Category {category_id} still has {book_count} book(s) and cannot be deleted",
            {"category_id": category_id, "book_count": book_count},
        )
        self.category_id = category_id
        self.book_count = book_count


class DuplicateCategoryName(CatalogError):
    code = ErrorCode.DUPLICATE_CATEGORY_NAME
    http_status = 409

    def __init__(self, name: str) -> None:
        super().__init__(f"Category name already exists: {name}", {"name": name})
        self.name = name


# ─── Bad input (400) ─────────────────────────────────────────────


class InvalidParameter(CatalogError, ValueError):
    """A query parameter is missing or malformed."""

    code = ErrorCode.INVALID_PARAMETER

    def __init__(self, message: str, parameter: Optional[str] = None) -> None:
        super().__init__(message, {"parameter": parameter} if parameter else None)
        self.parameter = parameter


class InvalidField(CatalogError, ValueError):
    """An entity field violates its constraints."""

    code = ErrorCode.INVALID_FIELD

    def __init__(self, field_name: str, message: str) -> None:
        super().__init__(message, {"field": field_name})
        self.field_name = field_name
