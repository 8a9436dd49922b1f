"""Response endpoints for the signed-in user.

Every route acts on the caller's own data; the user id always comes from
the principal, never from the body.
"""

from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from talent_questionnaire.guards.access import Principal, require_user
from talent_questionnaire.logic.services import Services
from talent_questionnaire.models.response import QuestionnaireResponse, ResponseBatch, ResponseSubmit
from talent_questionnaire.routes.deps import get_services

router = APIRouter()


@router.get(
    "/responses/my",
    summary="Flattened profile of the caller's answers keyed by question slug",
    operation_id="getMyProfile",
    response_model=Dict[str, Any],
)
def get_my_profile(
    principal: Principal = Depends(require_user),
    services: Services = Depends(get_services),
):
    return services.projector.build_profile(principal.user_id)


@router.get(
    "/responses/category/{category_id}",
    summary="The caller's responses for one category",
    operation_id="listMyResponsesByCategory",
    response_model=List[QuestionnaireResponse],
)
def list_my_category_responses(
    category_id: int,
    principal: Principal = Depends(require_user),
    services: Services = Depends(get_services),
):
    return services.responses.list_responses_by_category(principal.user_id, category_id)


@router.post(
    "/responses",
    summary="Save one response (insert or replace)",
    operation_id="saveResponse",
    response_model=QuestionnaireResponse,
)
def save_response(
    payload: ResponseSubmit,
    principal: Principal = Depends(require_user),
    services: Services = Depends(get_services),
):
    return services.responses.save_response(principal.user_id, payload.question_id, payload.response)


@router.post(
    "/responses/batch",
    summary="Save several responses in order",
    operation_id="saveResponses",
    response_model=List[QuestionnaireResponse],
)
def save_responses(
    payload: ResponseBatch,
    principal: Principal = Depends(require_user),
    services: Services = Depends(get_services),
):
    return services.responses.save_multiple_responses(principal.user_id, payload.responses)


@router.delete(
    "/responses/{question_id}",
    summary="Delete the caller's response to a question",
    operation_id="deleteMyResponse",
)
def delete_my_response(
    question_id: int,
    principal: Principal = Depends(require_user),
    services: Services = Depends(get_services),
):
    removed = services.responses.delete_response(principal.user_id, question_id)
    return {"success": True, "deleted": removed}


__all__ = ["router"]
