"""
Converters between domain entities/value objects and API schemas.

This module centralizes all conversion logic between the domain layer
and the API layer, maintaining clean separation of concerns.
"""

from bookcatalog.domain import entities as domain
from bookcatalog.domain import value_objects as domain_vo
from bookcatalog.api.v1 import schemas as api


def domain_book_to_api(book: domain.Book) -> api.Book:
    """
    Convert a domain Book entity to an API Book model.

    Args:
        book: Domain Book entity

    Returns:
        API Book model
    """
    return api.Book(
        id=book.id,
        title=book.title,
        author=book.author,
        price=book.price,
        isbn=book.isbn,
        publish_date=book.publish_date,
        status=book.status.value,
        category_ids=sorted(book.category_ids),
    )


def domain_category_to_api(category: domain.Category) -> api.Category:
    return api.Category(id=category.id, name=category.name, description=category.description)


def domain_page_to_api(page: domain_vo.Page) -> api.BookPage:
    return api.BookPage(
        items=[domain_book_to_api(book) for book in page.items],
        total=page.total,
        page=page.page,
        size=page.size,
        total_pages=page.total_pages,
    )


def api_create_request_to_domain(request: api.BookCreateRequest) -> domain_vo.BookDraft:
    """
    Convert API BookCreateRequest to a domain BookDraft.

    Args:
        request: API BookCreateRequest model

    Returns:
        Domain BookDraft value object
    """
    return domain_vo.BookDraft(
        title=request.title,
        author=request.author,
        price=request.price,
        isbn=request.isbn,
        publish_date=request.publish_date,
        status=request.status,
        category_ids=frozenset(request.category_ids),
    )


def api_update_request_to_domain(request: api.BookUpdateRequest) -> domain_vo.BookPatch:
    """
    Convert API BookUpdateRequest to a domain BookPatch.

    Args:
        request: API BookUpdateRequest model

    Returns:
        Domain BookPatch value object (None fields mean "unchanged")
    """
    return domain_vo.BookPatch(
        title=request.title,
        author=request.author,
        price=request.price,
        publish_date=request.publish_date,
        isbn=request.isbn,
        status=request.status,
        category_ids=frozenset(request.category_ids) if request.category_ids is not None else None,
    )


def api_filter_request_to_domain(request: api.BookFilterRequest) -> domain_vo.BookFilter:
    return domain_vo.BookFilter(
        title_contains=request.title_contains,
        author_contains=request.author_contains,
        min_price=request.min_price,
        max_price=request.max_price,
        status=request.status,
        category_ids=frozenset(request.category_ids),
    )
