"""
API endpoints for books.

This module defines the FastAPI routes for creating, reading, updating,
deleting and searching books. It handles HTTP concerns and delegates to
the lifecycle service; business errors propagate to the CatalogError
handler registered in ``bookcatalog.main``.

Fixed paths (/books/search, /books/available, ...) are registered before
/books/{book_id} so they are not captured by the id route.
"""

from decimal import Decimal

from fastapi import APIRouter, Depends, status

from bookcatalog.api.v1 import schemas as api
from bookcatalog.api.v1.converters import (
    api_create_request_to_domain,
    api_filter_request_to_domain,
    api_update_request_to_domain,
    domain_book_to_api,
    domain_page_to_api,
)
from bookcatalog.api.v1.dependencies import get_lifecycle_service
from bookcatalog.domain.services import BookLifecycleService
from bookcatalog.domain.value_objects import PageRequest

router = APIRouter(prefix="/books")


@router.post("", response_model=api.Book, status_code=status.HTTP_201_CREATED)
def create_book(
    request: api.BookCreateRequest,
    service: BookLifecycleService = Depends(get_lifecycle_service),
) -> api.Book:
    """
    Create a new book.

    The book always starts AVAILABLE. Fails with 409 DUPLICATE_ISBN when the
    ISBN is taken and 404 CATEGORY_NOT_FOUND on unknown category ids.
    """
    book = service.create_book(api_create_request_to_domain(request))
    return domain_book_to_api(book)


@router.get("", response_model=api.BookPage)
def list_books(
    page: int = 0,
    size: int = 20,
    sort_by: api.SortField = "id",
    descending: bool = False,
    service: BookLifecycleService = Depends(get_lifecycle_service),
) -> api.BookPage:
    """List books one page at a time."""
    page_request = PageRequest(page=page, size=size, sort_by=sort_by, descending=descending)
    return domain_page_to_api(service.list_books_page(page_request))


@router.post("/search", response_model=None)
def search_books(
    request: api.BookFilterRequest,
    service: BookLifecycleService = Depends(get_lifecycle_service),
) -> list[api.Book] | api.BookPage:
    """
    Structured search: all supplied criteria must match.

    Returns a plain list, or a page when ``page`` is set in the body.
    """
    filters = api_filter_request_to_domain(request)

    if request.page is None:
        return [domain_book_to_api(book) for book in service.search(filters)]

    page_request = PageRequest(
        page=request.page,
        size=request.size,
        sort_by=request.sort_by,
        descending=request.descending,
    )
    return domain_page_to_api(service.search_page(filters, page_request))


@router.get("/search", response_model=list[api.Book])
def search_by_title_or_author(
    title: str | None = None,
    author: str | None = None,
    service: BookLifecycleService = Depends(get_lifecycle_service),
) -> list[api.Book]:
    """Keyword search: title contains ``title`` OR author contains ``author``."""
    return [domain_book_to_api(book) for book in service.search_by_title_or_author(title, author)]


@router.get("/available", response_model=list[api.Book])
def get_available_books(
    service: BookLifecycleService = Depends(get_lifecycle_service),
) -> list[api.Book]:
    return [domain_book_to_api(book) for book in service.available_books()]


@router.get("/by-author", response_model=list[api.Book])
def get_books_by_author(
    author: str | None = None,
    service: BookLifecycleService = Depends(get_lifecycle_service),
) -> list[api.Book]:
    return [domain_book_to_api(book) for book in service.by_author(author)]


@router.get("/price-range", response_model=list[api.Book])
def get_books_by_price_range(
    min_price: Decimal | None = None,
    max_price: Decimal | None = None,
    service: BookLifecycleService = Depends(get_lifecycle_service),
) -> list[api.Book]:
    """Books priced within [min_price, max_price]; both bounds are required."""
    return [domain_book_to_api(book) for book in service.by_price_range(min_price, max_price)]


@router.get("/category/{category_id}", response_model=list[api.Book])
def get_books_by_category(
    category_id: int,
    service: BookLifecycleService = Depends(get_lifecycle_service),
) -> list[api.Book]:
    return [domain_book_to_api(book) for book in service.by_category(category_id)]


@router.get("/{book_id}", response_model=api.Book)
def get_book_by_id(
    book_id: int,
    service: BookLifecycleService = Depends(get_lifecycle_service),
) -> api.Book:
    """
    Get a book by its identifier.

    Raises:
        404: Book not found
    """
    return domain_book_to_api(service.get_book(book_id))


@router.api_route("/{book_id}", methods=["PATCH", "PUT"], response_model=api.Book)
def update_book(
    book_id: int,
    request: api.BookUpdateRequest,
    service: BookLifecycleService = Depends(get_lifecycle_service),
) -> api.Book:
    """
    Partially update a book.

    PUT is accepted as an alias of PATCH; in both cases omitted fields are
    left unchanged.
    """
    book = service.update_book(book_id, api_update_request_to_domain(request))
    return domain_book_to_api(book)


@router.delete("/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_book(
    book_id: int,
    service: BookLifecycleService = Depends(get_lifecycle_service),
) -> None:
    service.delete_book(book_id)


@router.delete("/{book_id}/categories", response_model=api.Book)
def clear_book_categories(
    book_id: int,
    service: BookLifecycleService = Depends(get_lifecycle_service),
) -> api.Book:
    """Remove every category from a book."""
    return domain_book_to_api(service.clear_categories(book_id))
