"""Question endpoints: public listing and admin management."""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends

from talent_questionnaire.guards.access import Principal, require_admin
from talent_questionnaire.logic.errors import NotFoundError
from talent_questionnaire.logic.services import Services
from talent_questionnaire.models.question import Question, QuestionCreate, QuestionReorder, QuestionUpdate
from talent_questionnaire.routes.deps import get_services

router = APIRouter()
admin_router = APIRouter()
logger = logging.getLogger(__name__)


@router.get(
    "/questions/{category_id}",
    summary="List active questions of a category in display order",
    operation_id="listQuestionsByCategory",
    response_model=List[Question],
)
def list_questions(category_id: int, services: Services = Depends(get_services)):
    return services.questions.list_questions_by_category(category_id)


@admin_router.get(
    "/questions/{question_id}",
    summary="Get a question, including inactive ones",
    operation_id="getQuestion",
    response_model=Question,
)
def get_question(
    question_id: int,
    principal: Principal = Depends(require_admin),
    services: Services = Depends(get_services),
):
    question = services.questions.get_question_by_id(question_id)
    if question is None:
        raise NotFoundError(f"question {question_id} not found")
    return question


@admin_router.post(
    "/questions",
    summary="Create a question",
    operation_id="createQuestion",
    response_model=Question,
)
def create_question(
    payload: QuestionCreate,
    principal: Principal = Depends(require_admin),
    services: Services = Depends(get_services),
):
    question = services.questions.create_question(payload)
    logger.info("admin_question_created by=%s id=%s", principal.user_id, question.id)
    return question


@admin_router.post(
    "/questions/reorder",
    summary="Reorder the questions of one category",
    operation_id="reorderQuestions",
    response_model=List[Question],
)
def reorder_questions(
    payload: QuestionReorder,
    principal: Principal = Depends(require_admin),
    services: Services = Depends(get_services),
):
    return services.questions.reorder_questions(payload.category_id, payload.ids)


@admin_router.put(
    "/questions/{question_id}",
    summary="Update a question",
    operation_id="updateQuestion",
    response_model=Question,
)
def update_question(
    question_id: int,
    payload: QuestionUpdate,
    principal: Principal = Depends(require_admin),
    services: Services = Depends(get_services),
):
    return services.questions.update_question(question_id, payload)


@admin_router.delete(
    "/questions/{question_id}",
    summary="Deactivate a question",
    operation_id="deactivateQuestion",
)
def deactivate_question(
    question_id: int,
    principal: Principal = Depends(require_admin),
    services: Services = Depends(get_services),
):
    services.questions.deactivate_question(question_id)
    logger.info("admin_question_deactivated by=%s id=%s", principal.user_id, question_id)
    return {"success": True}


__all__ = ["router", "admin_router"]
