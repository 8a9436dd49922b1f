"""Category endpoints: public reads and admin management."""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from talent_questionnaire.guards.access import Principal, require_admin
from talent_questionnaire.logic.errors import NotFoundError
from talent_questionnaire.logic.services import Services
from talent_questionnaire.models.category import Category, CategoryCreate, CategoryReorder, CategoryUpdate
from talent_questionnaire.models.response import CategoryWithQuestions
from talent_questionnaire.routes.deps import get_services

router = APIRouter()
admin_router = APIRouter()
logger = logging.getLogger(__name__)


@router.get(
    "/categories",
    summary="List active categories with their active questions",
    operation_id="listCategories",
    response_model=List[CategoryWithQuestions],
)
def list_categories(
    role: Optional[str] = Query(default=None),
    services: Services = Depends(get_services),
):
    return services.projector.get_categories_with_questions(role)


@router.get(
    "/categories/{category_id}",
    summary="Get one category",
    operation_id="getCategory",
    response_model=Category,
)
def get_category(category_id: int, services: Services = Depends(get_services)):
    category = services.categories.get_category_by_id(category_id)
    if category is None:
        raise NotFoundError(f"category {category_id} not found")
    return category


@admin_router.post(
    "/categories",
    summary="Create a category",
    operation_id="createCategory",
    response_model=Category,
)
def create_category(
    payload: CategoryCreate,
    principal: Principal = Depends(require_admin),
    services: Services = Depends(get_services),
):
    category = services.categories.create_category(payload)
    logger.info("admin_category_created by=%s id=%s", principal.user_id, category.id)
    return category


@admin_router.post(
    "/categories/reorder",
    summary="Reorder categories",
    operation_id="reorderCategories",
    response_model=List[Category],
)
def reorder_categories(
    payload: CategoryReorder,
    principal: Principal = Depends(require_admin),
    services: Services = Depends(get_services),
):
    return services.categories.reorder_categories(payload.ids)


@admin_router.put(
    "/categories/{category_id}",
    summary="Update a category",
    operation_id="updateCategory",
    response_model=Category,
)
def update_category(
    category_id: int,
    payload: CategoryUpdate,
    principal: Principal = Depends(require_admin),
    services: Services = Depends(get_services),
):
    return services.categories.update_category(category_id, payload)


@admin_router.delete(
    "/categories/{category_id}",
    summary="Deactivate a category",
    operation_id="deactivateCategory",
)
def deactivate_category(
    category_id: int,
    principal: Principal = Depends(require_admin),
    services: Services = Depends(get_services),
):
    services.categories.deactivate_category(category_id)
    logger.info("admin_category_deactivated by=%s id=%s", principal.user_id, category_id)
    return {"success": True}


__all__ = ["router", "admin_router"]
