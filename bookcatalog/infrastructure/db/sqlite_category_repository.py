"""
SQLite implementation of the CategoryRepository port.
"""

import sqlite3
from pathlib import Path
from typing import Iterable, List, Optional

from bookcatalog.domain.entities import Category
from bookcatalog.domain.errors import DuplicateCategoryName
from bookcatalog.domain.ports import CategoryRepository
from bookcatalog.infrastructure.db.sqlite_connection import get_connection, init_schema


class SqliteCategoryRepository(CategoryRepository):
    """Categories share the database file with SqliteBookRepository."""

    def __init__(self, db_path: Path) -> None:
        self._db_path = db_path
        init_schema(self._db_path)

    def _get_connection(self) -> sqlite3.Connection:
        return get_connection(self._db_path)

    @staticmethod
    def _row_to_category(row: sqlite3.Row) -> Category:
        return Category(id=row["id"], name=row["name"], description=row["description"])

    def get_by_id(self, category_id: int) -> Optional[Category]:
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM categories WHERE id = ?", (category_id,)
            ).fetchone()
            return self._row_to_category(row) if row else None

    def find_all_by_ids(self, category_ids: Iterable[int]) -> List[Category]:
        ids = sorted(set(category_ids))
        if not ids:
            return []

        placeholders = ", ".join("?" for _ in ids)
        with self._get_connection() as conn:
            rows = conn.execute(
                f"SELECT * FROM categories WHERE id IN ({placeholders}) ORDER BY id",
                ids,
            ).fetchall()
            return [self._row_to_category(row) for row in rows]

    def exists_by_name(self, name: str) -> bool:
        with self._get_connection() as conn:
            row = conn.execute("SELECT 1 FROM categories WHERE name = ?", (name,)).fetchone()
            return row is not None

    def save(self, category: Category) -> Category:
        try:
            with self._get_connection() as conn:
                if category.id is None:
                    cursor = conn.execute(
                        "INSERT INTO categories (name, description) VALUES (?, ?)",
                        (category.name, category.description),
                    )
                    category_id = cursor.lastrowid
                else:
                    conn.execute(
                        """
                        INSERT INTO categories (id, name, description) VALUES (?, ?, ?)
                        ON CONFLICT(id) DO UPDATE SET
                            name=excluded.name,
                            description=excluded.description
                        """,
                        (category.id, category.name, category.description),
                    )
                    category_id = category.id
                conn.commit()
        except sqlite3.IntegrityError as e:
            raise DuplicateCategoryName(category.name) from e
        except sqlite3.Error as e:
            raise RuntimeError(f"Database error while saving category: {e}") from e

        return Category(id=category_id, name=category.name, description=category.description)

    def delete(self, category_id: int) -> bool:
        with self._get_connection() as conn:
            cursor = conn.execute("DELETE FROM categories WHERE id = ?", (category_id,))
            conn.commit()
            return cursor.rowcount > 0

    def get_all(self) -> List[Category]:
        with self._get_connection() as conn:
            rows = conn.execute("SELECT * FROM categories ORDER BY id").fetchall()
            return [self._row_to_category(row) for row in rows]
