"""
SQLite implementation of the BookRepository port.

This adapter persists Book entities to a SQLite database, handling
serialization/deserialization of prices and dates, the book -> category
link table, and the unique constraint on ISBN. Search predicates are
compiled to SQL by ``sql_predicate_compiler``.
"""

import logging
import sqlite3
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import List, Optional

from bookcatalog.domain.entities import Book, BookStatus
from bookcatalog.domain.errors import DuplicateIsbn
from bookcatalog.domain.ports import BookRepository
from bookcatalog.domain.predicates import BookPredicate
from bookcatalog.domain.value_objects import Page, PageRequest
from bookcatalog.infrastructure.db.sql_predicate_compiler import compile_predicate
from bookcatalog.infrastructure.db.sqlite_connection import get_connection, init_schema

logger = logging.getLogger(__name__)

# price is stored as decimal TEXT; the decimal collation orders it by value
_SORT_COLUMNS = {
    "id": "b.id",
    "title": "py_lower(b.title)",
    "author": "py_lower(b.author)",
    "price": "b.price COLLATE decimal",
    "publish_date": "b.publish_date",
}


class SqliteBookRepository(BookRepository):
    """
    The unique constraint on isbn is enforced by the schema as well as by
    the lifecycle service; a constraint hit here surfaces as DuplicateIsbn.
    """

    def __init__(self, db_path: Path) -> None:
        """
        Initialize the repository with a database path
        """
        self._db_path = db_path
        init_schema(self._db_path)

    def _get_connection(self) -> sqlite3.Connection:
        return get_connection(self._db_path)

    def _book_to_row(self, book: Book) -> dict:
        """Convert a Book entity to a database row dict."""
        return {
            "id": book.id,
            "title": book.title,
            "author": book.author,
            "price": str(book.price),
            "publish_date": book.publish_date.isoformat() if book.publish_date else None,
            "isbn": book.isbn,
            "status": book.status.value,
        }

    def _row_to_book(self, row: sqlite3.Row, category_ids) -> Book:
        """Convert a database row to a Book entity."""
        return Book(
            id=row["id"],
            title=row["title"],
            author=row["author"],
            price=Decimal(row["price"]),
            publish_date=date.fromisoformat(row["publish_date"]) if row["publish_date"] else None,
            isbn=row["isbn"],
            status=BookStatus(row["status"]),
            category_ids=frozenset(category_ids),
        )

    def _load_books(self, conn: sqlite3.Connection, rows: List[sqlite3.Row]) -> List[Book]:
        """Attach category links to a batch of book rows, preserving row order."""
        if not rows:
            return []

        ids = [row["id"] for row in rows]
        placeholders = ", ".join("?" for _ in ids)
        links = conn.execute(
            f"SELECT book_id, category_id FROM book_categories WHERE book_id IN ({placeholders})",
            ids,
        ).fetchall()

        categories_by_book = {book_id: set() for book_id in ids}
        for link in links:
            categories_by_book[link["book_id"]].add(link["category_id"])

        return [self._row_to_book(row, categories_by_book[row["id"]]) for row in rows]

    def count(self) -> int:
        """Get the total number of books in the catalog."""
        with self._get_connection() as conn:
            result = conn.execute("SELECT COUNT(*) as cnt FROM books").fetchone()
            return result["cnt"]

    def get_by_id(self, book_id: int) -> Optional[Book]:
        """Retrieve a book by its id."""
        with self._get_connection() as conn:
            row = conn.execute("SELECT * FROM books WHERE id = ?", (book_id,)).fetchone()

            if row is None:
                return None

            return self._load_books(conn, [row])[0]

    def exists_by_isbn(self, isbn: str) -> bool:
        with self._get_connection() as conn:
            row = conn.execute("SELECT 1 FROM books WHERE isbn = ?", (isbn,)).fetchone()
            return row is not None

    def save(self, book: Book) -> Book:
        """Insert or update a book and replace its category links in one transaction."""
        row = self._book_to_row(book)

        try:
            with self._get_connection() as conn:
                if book.id is None:
                    cursor = conn.execute("""
                        INSERT INTO books (title, author, price, publish_date, isbn, status)
                        VALUES (:title, :author, :price, :publish_date, :isbn, :status)
                    """, row)
                    book_id = cursor.lastrowid
                else:
                    conn.execute("""
                        INSERT INTO books (id, title, author, price, publish_date, isbn, status)
                        VALUES (:id, :title, :author, :price, :publish_date, :isbn, :status)
                        ON CONFLICT(id) DO UPDATE SET
                            title=excluded.title,
                            author=excluded.author,
                            price=excluded.price,
                            publish_date=excluded.publish_date,
                            isbn=excluded.isbn,
                            status=excluded.status
                    """, row)
                    book_id = book.id

                conn.execute("DELETE FROM book_categories WHERE book_id = ?", (book_id,))
                conn.executemany(
                    "INSERT INTO book_categories (book_id, category_id) VALUES (?, ?)",
                    [(book_id, category_id) for category_id in sorted(book.category_ids)],
                )
                conn.commit()

        except sqlite3.IntegrityError as e:
            if "books.isbn" in str(e):
                raise DuplicateIsbn(book.isbn) from e
            raise ValueError(f"Book violates catalog constraints: {e}") from e
        except sqlite3.Error as e:
            raise RuntimeError(f"Database error while saving book: {e}") from e

        logger.debug(f"Saved book {book_id} with categories {sorted(book.category_ids)}")
        return self.get_by_id(book_id)

    def delete(self, book_id: int) -> bool:
        """Delete a book from the catalog. Returns True if deleted."""
        with self._get_connection() as conn:
            conn.execute("DELETE FROM book_categories WHERE book_id = ?", (book_id,))
            cursor = conn.execute("DELETE FROM books WHERE id = ?", (book_id,))
            conn.commit()
            return cursor.rowcount > 0

    def query(self, predicate: BookPredicate) -> List[Book]:
        where, params = compile_predicate(predicate)
        with self._get_connection() as conn:
            rows = conn.execute(
                f"SELECT b.* FROM books b WHERE {where} ORDER BY b.id",
                params,
            ).fetchall()
            return self._load_books(conn, rows)

    def query_page(self, predicate: BookPredicate, page: PageRequest) -> Page[Book]:
        where, params = compile_predicate(predicate)
        direction = "DESC" if page.descending else "ASC"
        order_by = f"{_SORT_COLUMNS[page.sort_by]} {direction}, b.id {direction}"

        with self._get_connection() as conn:
            total = conn.execute(
                f"SELECT COUNT(*) AS cnt FROM books b WHERE {where}", params
            ).fetchone()["cnt"]

            rows = conn.execute(
                f"SELECT b.* FROM books b WHERE {where} ORDER BY {order_by} LIMIT ? OFFSET ?",
                [*params, page.size, page.offset],
            ).fetchall()

            return Page(items=self._load_books(conn, rows), total=total, page=page.page, size=page.size)

    def count_referencing_category(self, category_id: int) -> int:
        with self._get_connection() as conn:
            result = conn.execute(
                "SELECT COUNT(*) AS cnt FROM book_categories WHERE category_id = ?",
                (category_id,),
            ).fetchone()
            return result["cnt"]
