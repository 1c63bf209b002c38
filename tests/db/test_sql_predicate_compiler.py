"""
Tests for compile_predicate.

These check the generated SQL shape and parameters only; the SQLite
repository tests cover execution against a real database.
"""

import pytest
from decimal import Decimal

from bookcatalog.domain.entities import BookStatus
from bookcatalog.domain.predicates import (
    MATCH_ALL,
    AllOf,
    AnyOf,
    AuthorContains,
    InAnyCategory,
    PriceAtLeast,
    PriceAtMost,
    StatusIs,
    TitleContains,
)
from bookcatalog.infrastructure.db import compile_predicate


class TestLeaves:

    def test_title_needle_is_lowercased_parameter(self):
        sql, params = compile_predicate(TitleContains("Spring"))

        assert sql == "instr(py_lower(b.title), ?) > 0"
        assert params == ["spring"]

    def test_author(self):
        sql, params = compile_predicate(AuthorContains("WALLS"))

        assert "b.author" in sql
        assert params == ["walls"]

    def test_price_bounds(self):
        assert compile_predicate(PriceAtLeast(Decimal("10.5"))) == (
            "py_decimal_cmp(b.price, ?) >= 0",
            ["10.5"],
        )
        assert compile_predicate(PriceAtMost(Decimal("20"))) == (
            "py_decimal_cmp(b.price, ?) <= 0",
            ["20"],
        )

    def test_price_bound_keeps_every_digit(self):
        _, params = compile_predicate(PriceAtMost(Decimal("10.0000000000000001")))

        assert params == ["10.0000000000000001"]

    def test_status(self):
        assert compile_predicate(StatusIs(BookStatus.DISCONTINUED)) == (
            "b.status = ?",
            ["DISCONTINUED"],
        )

    def test_categories_use_exists_subquery(self):
        sql, params = compile_predicate(InAnyCategory(frozenset({3, 1})))

        assert sql.startswith("EXISTS (SELECT 1 FROM book_categories bc")
        assert "IN (?, ?)" in sql
        assert params == [1, 3]

    def test_custom_alias(self):
        sql, _ = compile_predicate(StatusIs(BookStatus.AVAILABLE), alias="x")

        assert sql == "x.status = ?"


class TestCombinators:

    def test_match_all_is_true(self):
        assert compile_predicate(MATCH_ALL) == ("1", [])

    def test_empty_any_of_is_false(self):
        assert compile_predicate(AnyOf(())) == ("0", [])

    def test_all_of_joins_with_and_in_order(self):
        sql, params = compile_predicate(
            AllOf((TitleContains("java"), PriceAtMost(Decimal("50"))))
        )

        assert sql == "(instr(py_lower(b.title), ?) > 0) AND (py_decimal_cmp(b.price, ?) <= 0)"
        assert params == ["java", "50"]

    def test_any_of_joins_with_or(self):
        sql, params = compile_predicate(
            AnyOf((TitleContains("java"), AuthorContains("王")))
        )

        assert " OR " in sql
        assert params == ["java", "王"]

    def test_unknown_node_raises(self):
        with pytest.raises(TypeError):
            compile_predicate(object())
