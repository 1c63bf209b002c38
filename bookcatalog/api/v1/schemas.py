"""
Request and response bodies for the catalog API.

Schemas only check types; business constraints (lengths, non-negative
price, ISBN size) are enforced by the domain so that every client gets the
same INVALID_FIELD error regardless of transport.
"""

from datetime import date
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

BookStatusLiteral = Literal["AVAILABLE", "UNAVAILABLE", "DISCONTINUED"]
SortField = Literal["id", "title", "author", "price", "publish_date"]


# request bodies

class BookCreateRequest(BaseModel):
    """
    Request body for POST /books.

    ``status`` is accepted but ignored: new books always start AVAILABLE.
    """
    title: str = Field(description="Book title (max 200 characters)")
    author: str = Field(description="Author name(s) (max 100 characters)")
    price: Decimal = Field(description="Exact price, non-negative")
    isbn: str = Field(description="ISBN-10 or ISBN-13, hyphens allowed (10-17 characters)")
    publish_date: date | None = Field(default=None, description="Publication date")
    status: BookStatusLiteral | None = Field(default=None, description="Ignored on create")
    category_ids: list[int] = Field(default_factory=list, description="Ids of existing categories")


class BookUpdateRequest(BaseModel):
    """
    Request body for PATCH/PUT /books/{id}.

    Omitted or null fields are left unchanged. An empty ``category_ids``
    also leaves the categories unchanged; use DELETE /books/{id}/categories
    to clear them.
    """
    title: str | None = None
    author: str | None = None
    price: Decimal | None = None
    isbn: str | None = None
    publish_date: date | None = None
    status: BookStatusLiteral | None = None
    category_ids: list[int] | None = None


class BookFilterRequest(BaseModel):
    """Request body for POST /books/search. Every criterion is optional."""
    title_contains: str | None = None
    author_contains: str | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    status: BookStatusLiteral | None = None
    category_ids: list[int] = Field(default_factory=list)
    page: int | None = Field(default=None, description="Return a page instead of a list")
    size: int = 20
    sort_by: SortField = "id"
    descending: bool = False


class CategoryCreateRequest(BaseModel):
    name: str = Field(description="Unique category name")
    description: str | None = Field(default=None, description="Up to 500 characters")


# response bodies

class Book(BaseModel):
    """API representation of a Book entity."""
    id: int = Field(description="Catalog identifier")
    title: str
    author: str
    price: Decimal
    isbn: str
    publish_date: date | None = None
    status: BookStatusLiteral
    category_ids: list[int] = Field(default_factory=list, description="Sorted category ids")


class Category(BaseModel):
    """API representation of a Category entity."""
    id: int
    name: str
    description: str | None = None


class BookPage(BaseModel):
    """One page of books."""
    items: list[Book]
    total: int = Field(ge=0, description="Number of books matching, across all pages")
    page: int = Field(ge=0, description="0-based page index")
    size: int
    total_pages: int
