"""
Tests for SqliteBookRepository.

Validates the SQLite implementation of the BookRepository protocol,
including CRUD operations, category links, constraint handling, data
serialization and predicate queries compiled to SQL.

Test Pattern: AAA (Arrange-Act-Assert)
- Arrange: Set up test data and preconditions
- Act: Execute the operation being tested
- Assert: Verify the expected outcomes
"""

import pytest
from dataclasses import replace
from datetime import date
from decimal import Decimal

from bookcatalog.domain.entities import Book, BookStatus, Category
from bookcatalog.domain.errors import DuplicateIsbn
from bookcatalog.domain.predicates import MATCH_ALL, build_predicate, title_or_author_predicate
from bookcatalog.domain.value_objects import BookFilter, PageRequest
from bookcatalog.infrastructure.db import SqliteBookRepository, SqliteCategoryRepository


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def db_path(tmp_path):
    """
    A temporary database file for each test.

    Uses pytest's tmp_path fixture to ensure isolation between tests.
    """
    return tmp_path / "test_catalog.db"


@pytest.fixture
def repo(db_path):
    return SqliteBookRepository(db_path)


@pytest.fixture
def categories(db_path):
    """Two stored categories sharing the book repository's database."""
    category_repo = SqliteCategoryRepository(db_path)
    return [
        category_repo.save(Category(name="Computer Science")),
        category_repo.save(Category(name="数学")),
    ]


@pytest.fixture
def sample_book():
    """A fully populated, not yet stored book."""
    return Book.create_new(
        title="Spring in Action",
        author="Craig Walls",
        price=Decimal("59.90"),
        isbn="978-7-121-37213-0",
        publish_date=date(2019, 10, 1),
    )


# ============================================================================
# INITIALIZATION TESTS
# ============================================================================

class TestRepositoryInitialization:
    """Tests for repository initialization and schema creation."""

    def test_creates_tables_on_init(self, repo):
        """Repository should create its tables automatically on initialization."""
        assert repo.count() == 0

    def test_reopening_keeps_data(self, db_path, sample_book):
        SqliteBookRepository(db_path).save(sample_book)

        assert SqliteBookRepository(db_path).count() == 1


# ============================================================================
# SAVE / GET TESTS
# ============================================================================

class TestSaveAndGet:
    """Tests for save() and get_by_id()."""

    def test_save_assigns_id(self, repo, sample_book):
        saved = repo.save(sample_book)

        assert saved.id is not None
        assert sample_book.id is None
        assert repo.count() == 1

    def test_round_trip_preserves_all_fields(self, repo, sample_book, categories):
        """Decimal prices, dates, status and category links survive storage."""
        book = replace(sample_book, category_ids=frozenset(c.id for c in categories))

        saved = repo.save(book)
        loaded = repo.get_by_id(saved.id)

        assert loaded == replace(book, id=saved.id)
        assert isinstance(loaded.price, Decimal)
        assert loaded.price == Decimal("59.90")
        assert loaded.publish_date == date(2019, 10, 1)

    def test_get_missing_returns_none(self, repo):
        assert repo.get_by_id(12345) is None

    def test_save_existing_updates_in_place(self, repo, sample_book):
        saved = repo.save(sample_book)

        repo.save(replace(saved, title="Spring in Action, 6th Edition", status=BookStatus.UNAVAILABLE))

        loaded = repo.get_by_id(saved.id)
        assert loaded.title == "Spring in Action, 6th Edition"
        assert loaded.status is BookStatus.UNAVAILABLE
        assert repo.count() == 1

    def test_save_replaces_category_links(self, repo, sample_book, categories):
        cs, math = categories
        saved = repo.save(replace(sample_book, category_ids=frozenset({cs.id})))

        repo.save(replace(saved, category_ids=frozenset({math.id})))

        assert repo.get_by_id(saved.id).category_ids == {math.id}

    def test_save_without_categories_clears_links(self, repo, sample_book, categories):
        saved = repo.save(replace(sample_book, category_ids=frozenset(c.id for c in categories)))

        repo.save(replace(saved, category_ids=frozenset()))

        assert repo.get_by_id(saved.id).category_ids == frozenset()

    def test_duplicate_isbn_raises(self, repo, sample_book):
        """The schema's unique constraint surfaces as a domain error."""
        repo.save(sample_book)

        with pytest.raises(DuplicateIsbn):
            repo.save(replace(sample_book, title="Copy"))

        assert repo.count() == 1

    def test_exists_by_isbn(self, repo, sample_book):
        assert not repo.exists_by_isbn(sample_book.isbn)

        repo.save(sample_book)

        assert repo.exists_by_isbn(sample_book.isbn)


# ============================================================================
# DELETE / COUNT TESTS
# ============================================================================

class TestDeleteAndCounts:
    """Tests for delete() and the count queries."""

    def test_delete_existing(self, repo, sample_book):
        saved = repo.save(sample_book)

        assert repo.delete(saved.id) is True
        assert repo.get_by_id(saved.id) is None

    def test_delete_missing(self, repo):
        assert repo.delete(99) is False

    def test_count_referencing_category(self, repo, sample_book, categories):
        cs, math = categories
        repo.save(replace(sample_book, category_ids=frozenset({cs.id, math.id})))
        repo.save(replace(sample_book, isbn="978-0-13-516630-7", category_ids=frozenset({cs.id})))

        assert repo.count_referencing_category(cs.id) == 2
        assert repo.count_referencing_category(math.id) == 1

    def test_delete_removes_category_links(self, repo, sample_book, categories):
        cs, _ = categories
        saved = repo.save(replace(sample_book, category_ids=frozenset({cs.id})))

        repo.delete(saved.id)

        assert repo.count_referencing_category(cs.id) == 0


# ============================================================================
# QUERY TESTS
# ============================================================================

@pytest.fixture
def stored(repo, categories):
    """Three stored books covering prices, statuses and categories."""
    cs, math = categories
    return [
        repo.save(Book(
            title="Spring in Action",
            author="Craig Walls",
            price=Decimal("59.00"),
            isbn="978-7-121-37213-0",
            category_ids={cs.id},
        )),
        repo.save(Book(
            title="Core Java",
            author="Cay S. Horstmann",
            price=Decimal("50.00"),
            isbn="978-0-13-516630-7",
            status=BookStatus.UNAVAILABLE,
            category_ids={cs.id, math.id},
            publish_date=date(2018, 9, 1),
        )),
        repo.save(Book(
            title="ÉCOLE des Algorithmes",
            author="王晓东",
            price=Decimal("9.50"),
            isbn="978-7-302-24406-5",
        )),
    ]


class TestQuery:
    """Tests for query() with compiled predicates."""

    def test_match_all(self, repo, stored):
        assert repo.query(MATCH_ALL) == stored

    def test_title_case_insensitive(self, repo, stored):
        assert repo.query(build_predicate(BookFilter(title_contains="SPRING"))) == [stored[0]]

    def test_unicode_case_folding(self, repo, stored):
        """Non-ASCII case folding follows Python, not SQLite's ASCII-only LIKE."""
        assert repo.query(build_predicate(BookFilter(title_contains="école"))) == [stored[2]]

    def test_like_wildcards_are_literal(self, repo, stored):
        assert repo.query(build_predicate(BookFilter(title_contains="%"))) == []
        assert repo.query(build_predicate(BookFilter(title_contains="_"))) == []

    def test_price_compared_numerically(self, repo, stored):
        """9.50 must not sort after 50.00 as it would in a text comparison."""
        result = repo.query(build_predicate(BookFilter(min_price=10)))

        assert result == [stored[0], stored[1]]

    def test_price_bounds_inclusive(self, repo, stored):
        result = repo.query(build_predicate(BookFilter(min_price=50, max_price=59)))

        assert result == [stored[0], stored[1]]

    def test_price_bounds_are_exact_decimals(self, repo, stored):
        """A bound one unit past the 16th decimal place still separates prices."""
        precise = repo.save(Book(
            title="Precise",
            author="Someone",
            price=Decimal("10.0000000000000001"),
            isbn="978-0-00-000001-1",
        ))

        assert precise not in repo.query(build_predicate(BookFilter(min_price=0, max_price=10)))
        assert repo.query(
            build_predicate(BookFilter(min_price="10.0000000000000001", max_price=11))
        ) == [precise]

    def test_status(self, repo, stored):
        result = repo.query(build_predicate(BookFilter(status=BookStatus.UNAVAILABLE)))

        assert result == [stored[1]]

    def test_category_intersection(self, repo, stored, categories):
        _, math = categories

        assert repo.query(build_predicate(BookFilter(category_ids={math.id}))) == [stored[1]]
        assert repo.query(build_predicate(BookFilter(category_ids={math.id, 999}))) == [stored[1]]
        assert repo.query(build_predicate(BookFilter(category_ids={999}))) == []

    def test_combined_and(self, repo, stored, categories):
        cs, _ = categories
        predicate = build_predicate(BookFilter(category_ids={cs.id}, status=BookStatus.AVAILABLE))

        assert repo.query(predicate) == [stored[0]]

    def test_title_or_author(self, repo, stored):
        assert repo.query(title_or_author_predicate("Java", "王")) == [stored[1], stored[2]]

    def test_sql_agrees_with_in_memory_evaluation(self, repo, stored, categories):
        """Every filter combination selects the same books in SQL and in memory."""
        cs, math = categories
        filters = [
            BookFilter(),
            BookFilter(title_contains="in"),
            BookFilter(author_contains="s", max_price=55),
            BookFilter(min_price="9.5", status=BookStatus.AVAILABLE),
            BookFilter(category_ids={cs.id}, min_price=55),
            BookFilter(category_ids={math.id, cs.id}, title_contains="java"),
            BookFilter(min_price="9.5000000000000001"),
            BookFilter(max_price="49.9999999999999999"),
        ]

        for f in filters:
            predicate = build_predicate(f)
            expected = [book for book in stored if predicate.matches(book)]
            assert repo.query(predicate) == expected, f


class TestQueryPage:
    """Tests for query_page() paging and sorting."""

    def test_first_page_sorted_by_price(self, repo, stored):
        page = repo.query_page(MATCH_ALL, PageRequest(page=0, size=2, sort_by="price"))

        assert page.total == 3
        assert page.items == [stored[2], stored[1]]
        assert page.has_next()

    def test_last_page(self, repo, stored):
        page = repo.query_page(MATCH_ALL, PageRequest(page=1, size=2, sort_by="price"))

        assert page.items == [stored[0]]
        assert not page.has_next()

    def test_descending_title(self, repo, stored):
        page = repo.query_page(MATCH_ALL, PageRequest(size=10, sort_by="title", descending=True))

        # lowercased titles compare by code point, so "é" sorts after "s"
        assert [book.title for book in page.items] == [
            "ÉCOLE des Algorithmes",
            "Spring in Action",
            "Core Java",
        ]

    def test_page_with_filter(self, repo, stored):
        page = repo.query_page(
            build_predicate(BookFilter(max_price=55)), PageRequest(size=1)
        )

        assert page.total == 2
        assert page.items == [stored[1]]

    def test_page_past_end_is_empty(self, repo, stored):
        page = repo.query_page(MATCH_ALL, PageRequest(page=5, size=10))

        assert page.items == []
        assert page.total == 3

    def test_price_sort_is_exact(self, repo):
        for suffix, isbn in (("2", "978-0-00-000002-2"), ("1", "978-0-00-000003-3")):
            repo.save(Book(
                title=f"Edition {suffix}",
                author="Someone",
                price=Decimal(f"10.000000000000000{suffix}"),
                isbn=isbn,
            ))
        repo.save(Book(title="Cheap", author="Someone", price=Decimal("9.99"), isbn="978-0-00-000004-4"))

        page = repo.query_page(MATCH_ALL, PageRequest(size=10, sort_by="price", descending=True))

        assert [b.title for b in page.items] == ["Edition 2", "Edition 1", "Cheap"]
