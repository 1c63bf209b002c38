"""
Domain layer - Core business logic and entities.

This layer contains the business entities, value objects, search predicates
and business errors, and defines the ports (interfaces) that the
infrastructure layer must implement.

It has NO dependencies on external frameworks, databases, or APIs.
"""

from .entities import Book, BookStatus, Category
from .value_objects import BookFilter, BookDraft, BookPatch, CategoryDraft, PageRequest, Page

__all__ = [
    # Entities
    "Book",
    "BookStatus",
    "Category",
    # Value Objects
    "BookFilter",
    "BookDraft",
    "BookPatch",
    "CategoryDraft",
    "PageRequest",
    "Page",
]
