"""
Domain service that turns requested category ids into stored categories.
"""

import logging
from typing import Dict, Iterable

from bookcatalog.domain.entities import Category
from bookcatalog.domain.errors import CategoryNotFound
from bookcatalog.domain.ports import CategoryRepository

logger = logging.getLogger(__name__)


class CategoryResolver:
    """
    Validates that every requested category exists.

    Resolution is all-or-nothing: a single unknown id fails the whole
    request, and the error lists exactly the ids that were not found.
    """

    def __init__(self, category_repo: CategoryRepository) -> None:
        self._category_repo = category_repo

    def resolve(self, requested_ids: Iterable[int]) -> Dict[int, Category]:
        """
        Look up all requested categories in one batch.

        Args:
            requested_ids: Category ids to resolve (duplicates are ignored)

        Returns:
            Mapping of id -> Category for every requested id

        Raises:
            CategoryNotFound: If any id has no stored category; carries the
                missing ids sorted ascending
        """
        wanted = set(requested_ids)
        if not wanted:
            return {}

        found = {
            category.id: category
            for category in self._category_repo.find_all_by_ids(wanted)
        }

        missing = wanted - found.keys()
        if missing:
            logger.warning(f"Unknown category ids requested: {sorted(missing)}")
            raise CategoryNotFound(missing)

        return found
