"""
Compiles domain book predicates into a SQLite WHERE clause.

The compiled SQL must agree with ``matches()`` on every criterion:

- substring matches go through the ``py_lower`` function registered on each
  connection, so case folding is Python's (Unicode-aware) rather than
  SQLite's ASCII-only LIKE
- prices are stored as exact decimal TEXT and compared as Decimal through
  ``py_decimal_cmp``, never as floating point
- category membership is an EXISTS over the link table (inner-join semantics)
"""

from typing import List, Tuple

from bookcatalog.domain.predicates import (
    AllOf,
    AnyOf,
    AuthorContains,
    BookPredicate,
    InAnyCategory,
    PriceAtLeast,
    PriceAtMost,
    StatusIs,
    TitleContains,
)

CompiledSql = Tuple[str, List[object]]


def compile_predicate(predicate: BookPredicate, alias: str = "b") -> CompiledSql:
    """
    Translate a predicate tree into ``(sql, params)`` over the books table.

    Args:
        predicate: Domain predicate to compile
        alias: Alias of the books table in the enclosing query

    Returns:
        A parenthesized boolean SQL expression and its positional parameters

    Raises:
        TypeError: If the predicate contains an unknown node type
    """
    if isinstance(predicate, TitleContains):
        return f"instr(py_lower({alias}.title), ?) > 0", [predicate.needle.lower()]

    if isinstance(predicate, AuthorContains):
        return f"instr(py_lower({alias}.author), ?) > 0", [predicate.needle.lower()]

    if isinstance(predicate, PriceAtLeast):
        return f"py_decimal_cmp({alias}.price, ?) >= 0", [str(predicate.bound)]

    if isinstance(predicate, PriceAtMost):
        return f"py_decimal_cmp({alias}.price, ?) <= 0", [str(predicate.bound)]

    if isinstance(predicate, StatusIs):
        return f"{alias}.status = ?", [predicate.status.value]

    if isinstance(predicate, InAnyCategory):
        if not predicate.category_ids:
            return "0", []
        placeholders = ", ".join("?" for _ in predicate.category_ids)
        sql = (
            "EXISTS (SELECT 1 FROM book_categories bc "
            f"WHERE bc.book_id = {alias}.id AND bc.category_id IN ({placeholders}))"
        )
        return sql, sorted(predicate.category_ids)

    if isinstance(predicate, (AllOf, AnyOf)):
        if not predicate.criteria:
            return ("1", []) if isinstance(predicate, AllOf) else ("0", [])

        joiner = " AND " if isinstance(predicate, AllOf) else " OR "
        parts: List[str] = []
        params: List[object] = []
        for criterion in predicate.criteria:
            sql, criterion_params = compile_predicate(criterion, alias)
            parts.append(f"({sql})")
            params.extend(criterion_params)
        return joiner.join(parts), params

    raise TypeError(f"Cannot compile predicate of type {type(predicate).__name__}")
