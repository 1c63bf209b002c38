"""
Tests for SqliteCategoryRepository.
"""

import pytest

from bookcatalog.domain.entities import Category
from bookcatalog.domain.errors import DuplicateCategoryName
from bookcatalog.infrastructure.db import SqliteCategoryRepository


@pytest.fixture
def repo(tmp_path):
    return SqliteCategoryRepository(tmp_path / "test_catalog.db")


class TestSaveAndGet:

    def test_save_assigns_sequential_ids(self, repo):
        first = repo.save(Category(name="Computer Science"))
        second = repo.save(Category(name="Math", description="Pure and applied"))

        assert first.id is not None
        assert second.id > first.id

    def test_get_by_id(self, repo):
        saved = repo.save(Category(name="History", description="Old things"))

        loaded = repo.get_by_id(saved.id)

        assert loaded.name == "History"
        assert loaded.description == "Old things"

    def test_get_missing_returns_none(self, repo):
        assert repo.get_by_id(7) is None

    def test_duplicate_name_raises(self, repo):
        repo.save(Category(name="Math"))

        with pytest.raises(DuplicateCategoryName):
            repo.save(Category(name="Math"))

    def test_update_existing(self, repo):
        saved = repo.save(Category(name="Math"))

        repo.save(Category(id=saved.id, name="Mathematics", description="Renamed"))

        assert repo.get_by_id(saved.id).name == "Mathematics"
        assert len(repo.get_all()) == 1

    def test_exists_by_name(self, repo):
        repo.save(Category(name="Math"))

        assert repo.exists_by_name("Math")
        assert not repo.exists_by_name("math")


class TestBatchLookup:

    def test_find_all_by_ids_returns_known_only(self, repo):
        a = repo.save(Category(name="A"))
        b = repo.save(Category(name="B"))

        found = repo.find_all_by_ids([b.id, a.id, 999, b.id])

        assert [c.id for c in found] == [a.id, b.id]

    def test_find_all_by_ids_empty(self, repo):
        assert repo.find_all_by_ids([]) == []


class TestDeleteAndList:

    def test_get_all_ordered_by_id(self, repo):
        names = ["Zoology", "Art", "Math"]
        for name in names:
            repo.save(Category(name=name))

        assert [c.name for c in repo.get_all()] == names

    def test_delete(self, repo):
        saved = repo.save(Category(name="Math"))

        assert repo.delete(saved.id) is True
        assert repo.get_by_id(saved.id) is None
        assert repo.delete(saved.id) is False
