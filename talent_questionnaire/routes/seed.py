"""Starter dataset endpoint (super admin only)."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from talent_questionnaire.guards.access import Principal, require_super_admin
from talent_questionnaire.logic.services import Services
from talent_questionnaire.routes.deps import get_services

admin_router = APIRouter()
logger = logging.getLogger(__name__)


@admin_router.post(
    "/seed",
    summary="Create any missing part of the starter questionnaire",
    operation_id="seedQuestionnaire",
)
def seed_questionnaire(
    principal: Principal = Depends(require_super_admin),
    services: Services = Depends(get_services),
):
    report = services.seeder.seed_all()
    logger.info("admin_seed_run by=%s", principal.user_id)
    return {"success": True, "message": "Questionnaires seeded successfully", "report": report.to_dict()}


__all__ = ["admin_router"]
