"""
Connection factory and schema for the SQLite catalog database.

Books and categories live in the same database file; the book repository
owns the ``book_categories`` link table.

Each connection registers the Python helpers the compiled predicates use:

- ``py_lower(text)``: Unicode-aware lowercasing
- ``py_decimal_cmp(a, b)``: exact comparison of decimal TEXT values, -1/0/1
- the ``decimal`` collation, which orders price TEXT by numeric value
"""

import sqlite3
from decimal import Decimal
from pathlib import Path


def _py_lower(value):
    return value.lower() if value is not None else None


def _decimal_cmp(left, right) -> int:
    a, b = Decimal(left), Decimal(right)
    return (a > b) - (a < b)


def _py_decimal_cmp(left, right):
    if left is None or right is None:
        return None
    return _decimal_cmp(str(left), str(right))


def get_connection(db_path: Path) -> sqlite3.Connection:
    """Get a database connection with row factory and catalog functions."""
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row  # Needed to access by name column and not a number
    conn.execute("PRAGMA foreign_keys = ON")
    conn.create_function("py_lower", 1, _py_lower, deterministic=True)
    conn.create_function("py_decimal_cmp", 2, _py_decimal_cmp, deterministic=True)
    conn.create_collation("decimal", _decimal_cmp)
    return conn


def init_schema(db_path: Path) -> None:
    """Create the catalog tables if they don't exist."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    try:
        with conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS categories (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL UNIQUE,
                    description TEXT
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS books (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    author TEXT NOT NULL,
                    price TEXT NOT NULL,
                    publish_date TEXT,
                    isbn TEXT NOT NULL UNIQUE,
                    status TEXT NOT NULL
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS book_categories (
                    book_id INTEGER NOT NULL REFERENCES books(id) ON DELETE CASCADE,
                    category_id INTEGER NOT NULL REFERENCES categories(id),
                    PRIMARY KEY (book_id, category_id)
                )
            """)

            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_book_categories_category "
                "ON book_categories(category_id)"
            )
    finally:
        conn.close()
