"""Response models and the derived category/profile views."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from talent_questionnaire.models.base import CamelInput, CamelModel
from talent_questionnaire.models.category import Category
from talent_questionnaire.models.question import Question


class QuestionnaireResponse(CamelModel):
    id: int
    user_id: str
    question_id: int
    response: Any
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ResponseSubmit(CamelInput):
    question_id: int
    response: Any


class ResponseBatch(CamelInput):
    responses: List[ResponseSubmit]


class CategoryWithQuestions(Category):
    questions: List[Question] = Field(default_factory=list)


UserProfile = Dict[str, Any]


__all__ = [
    "QuestionnaireResponse",
    "ResponseSubmit",
    "ResponseBatch",
    "CategoryWithQuestions",
    "UserProfile",
]
