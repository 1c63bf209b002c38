# SQLite infrastructure package
"""
SQLite adapters for the catalog ports.

This package contains:
- SqliteBookRepository: books, their category links and predicate queries
- SqliteCategoryRepository: categories
- compile_predicate: domain predicate -> SQL WHERE clause
"""

from .sql_predicate_compiler import compile_predicate
from .sqlite_book_repository import SqliteBookRepository
from .sqlite_category_repository import SqliteCategoryRepository

__all__ = ["compile_predicate", "SqliteBookRepository", "SqliteCategoryRepository"]
