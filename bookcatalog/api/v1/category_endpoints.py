"""
API endpoints for categories.
"""

from fastapi import APIRouter, Depends, status

from bookcatalog.api.v1 import schemas as api
from bookcatalog.api.v1.converters import domain_category_to_api
from bookcatalog.api.v1.dependencies import get_lifecycle_service
from bookcatalog.domain.services import BookLifecycleService
from bookcatalog.domain.value_objects import CategoryDraft

router = APIRouter(prefix="/categories")


@router.post("", response_model=api.Category, status_code=status.HTTP_201_CREATED)
def create_category(
    request: api.CategoryCreateRequest,
    service: BookLifecycleService = Depends(get_lifecycle_service),
) -> api.Category:
    category = service.create_category(
        CategoryDraft(name=request.name, description=request.description)
    )
    return domain_category_to_api(category)


@router.get("", response_model=list[api.Category])
def list_categories(
    service: BookLifecycleService = Depends(get_lifecycle_service),
) -> list[api.Category]:
    return [domain_category_to_api(category) for category in service.list_categories()]


@router.get("/{category_id}", response_model=api.Category)
def get_category(
    category_id: int,
    service: BookLifecycleService = Depends(get_lifecycle_service),
) -> api.Category:
    return domain_category_to_api(service.get_category(category_id))


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: int,
    service: BookLifecycleService = Depends(get_lifecycle_service),
) -> None:
    """
    Delete a category.

    Fails with 409 CATEGORY_HAS_ASSOCIATED_BOOKS while any book references it.
    """
    service.delete_category(category_id)
