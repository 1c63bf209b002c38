"""
FastAPI dependencies for dependency injection.

This module provides singleton instances of repositories and services
for use with FastAPI's Depends() system.

Note: We use module-level singletons instead of @lru_cache with Depends()
parameters, which is an antipattern that can cause unexpected behavior.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from bookcatalog.domain.ports import BookRepository, CategoryRepository
from bookcatalog.domain.services import BookLifecycleService
from bookcatalog.infrastructure.db import SqliteBookRepository, SqliteCategoryRepository
from bookcatalog.infrastructure.memory import InMemoryBookRepository, InMemoryCategoryRepository

logger = logging.getLogger(__name__)

# Configuration from environment
CATALOG_STORE = os.getenv("CATALOG_STORE", "sqlite")
DB_PATH = Path(os.getenv("DB_PATH", "data/catalog.db"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Module-level singletons (initialized lazily)
_book_repository: Optional[BookRepository] = None
_category_repository: Optional[CategoryRepository] = None
_lifecycle_service: Optional[BookLifecycleService] = None


def _use_memory_store() -> bool:
    if CATALOG_STORE not in ("sqlite", "memory"):
        raise RuntimeError(f"CATALOG_STORE must be 'sqlite' or 'memory', got '{CATALOG_STORE}'")
    return CATALOG_STORE == "memory"


def get_book_repository() -> BookRepository:
    """Provide a singleton instance of the book repository."""
    global _book_repository
    if _book_repository is None:
        if _use_memory_store():
            _book_repository = InMemoryBookRepository()
        else:
            _book_repository = SqliteBookRepository(DB_PATH)
        logger.info(f"Book repository: {type(_book_repository).__name__}")
    return _book_repository


def get_category_repository() -> CategoryRepository:
    """Provide a singleton instance of the category repository."""
    global _category_repository
    if _category_repository is None:
        if _use_memory_store():
            _category_repository = InMemoryCategoryRepository()
        else:
            _category_repository = SqliteCategoryRepository(DB_PATH)
    return _category_repository


def get_lifecycle_service() -> BookLifecycleService:
    """Provide the lifecycle service with both repositories wired."""
    global _lifecycle_service
    if _lifecycle_service is None:
        _lifecycle_service = BookLifecycleService(
            book_repo=get_book_repository(),
            category_repo=get_category_repository(),
        )
    return _lifecycle_service


def reset_dependencies() -> None:
    """
    Reset all singletons. Useful for testing.

    This allows tests to inject mock dependencies by resetting
    the module state between test cases.
    """
    global _book_repository, _category_repository, _lifecycle_service

    _book_repository = None
    _category_repository = None
    _lifecycle_service = None
