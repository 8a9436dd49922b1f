"""Question models.

``options`` is always an already-parsed ordered list of ``QuestionOption``;
callers never see the storage encoding.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field, computed_field

from talent_questionnaire.models.base import CamelInput, CamelModel
from talent_questionnaire.models.question_kind import uses_options


class QuestionOption(CamelModel):
    value: str
    label: str
    description: Optional[str] = None


class Question(CamelModel):
    id: int
    category_id: int
    question: str
    slug: str
    question_type: str
    options: List[QuestionOption] = Field(default_factory=list)
    is_required: bool = False
    sort_order: int = 0
    help_text: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @computed_field  # type: ignore[misc]
    @property
    def is_complete(self) -> bool:
        """Option-backed questions without options cannot be answered yet."""
        return not (uses_options(self.question_type) and not self.options)

    def option_values(self) -> List[str]:
        return [o.value for o in self.options]


class QuestionCreate(CamelInput):
    category_id: int
    question: str
    slug: str
    question_type: str
    options: Optional[List[QuestionOption]] = None
    is_required: bool = False
    sort_order: int = 0
    help_text: Optional[str] = None
    is_active: bool = True


class QuestionUpdate(CamelInput):
    question: Optional[str] = None
    slug: Optional[str] = None
    question_type: Optional[str] = None
    options: Optional[List[QuestionOption]] = None
    is_required: Optional[bool] = None
    sort_order: Optional[int] = None
    help_text: Optional[str] = None
    is_active: Optional[bool] = None


class QuestionReorder(CamelInput):
    category_id: int
    ids: List[int]


__all__ = ["QuestionOption", "Question", "QuestionCreate", "QuestionUpdate", "QuestionReorder"]
