"""APIRouter registration for the questionnaire service.

Public and user routes live under ``/api/questionnaire``; admin routes under
``/api/admin/questionnaire``.
"""

from __future__ import annotations

from fastapi import APIRouter

from talent_questionnaire.routes.categories import admin_router as categories_admin_router
from talent_questionnaire.routes.categories import router as categories_router
from talent_questionnaire.routes.questions import admin_router as questions_admin_router
from talent_questionnaire.routes.questions import router as questions_router
from talent_questionnaire.routes.responses import router as responses_router
from talent_questionnaire.routes.seed import admin_router as seed_admin_router

PUBLIC_PREFIX = "/api/questionnaire"
ADMIN_PREFIX = "/api/admin/questionnaire"

api_router = APIRouter()
api_router.include_router(categories_router, prefix=PUBLIC_PREFIX, tags=["Categories"])
api_router.include_router(questions_router, prefix=PUBLIC_PREFIX, tags=["Questions"])
api_router.include_router(responses_router, prefix=PUBLIC_PREFIX, tags=["Responses"])
api_router.include_router(categories_admin_router, prefix=ADMIN_PREFIX, tags=["Admin", "Categories"])
api_router.include_router(questions_admin_router, prefix=ADMIN_PREFIX, tags=["Admin", "Questions"])
api_router.include_router(seed_admin_router, prefix=ADMIN_PREFIX, tags=["Admin", "Seed"])

__all__ = ["api_router", "PUBLIC_PREFIX", "ADMIN_PREFIX"]
