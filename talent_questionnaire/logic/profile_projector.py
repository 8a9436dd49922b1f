"""Derived views over categories, questions and responses.

``build_profile`` flattens a user's responses into ``{question_slug: value}``.
Only active questions in active categories are indexed; responses pointing
anywhere else are skipped without error. Question slugs are unique per
category, so when the user answered the same slug in two categories the
answer to the question that comes first in display order wins.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from talent_questionnaire.logic.repository_categories import CategoryRegistry
from talent_questionnaire.logic.repository_questions import QuestionRegistry
from talent_questionnaire.logic.repository_responses import ResponseStore
from talent_questionnaire.models.question import Question
from talent_questionnaire.models.response import CategoryWithQuestions, UserProfile

logger = logging.getLogger(__name__)


class ProfileProjector:
    def __init__(
        self,
        categories: CategoryRegistry,
        questions: QuestionRegistry,
        responses: ResponseStore,
    ) -> None:
        self._categories = categories
        self._questions = questions
        self._responses = responses

    def get_categories_with_questions(self, for_role: Optional[str] = None) -> List[CategoryWithQuestions]:
        categories = self._categories.list_categories(for_role)
        grouped = self._questions.list_questions_for_categories(c.id for c in categories)
        return [
            CategoryWithQuestions(**c.model_dump(), questions=grouped.get(c.id, []))
            for c in categories
        ]

    def _question_index(self) -> Dict[int, Tuple[int, Question]]:
        """Every active question in an active category, keyed by id, with its display position."""
        index: Dict[int, Tuple[int, Question]] = {}
        position = 0
        for category in self.get_categories_with_questions():
            for question in category.questions:
                index[question.id] = (position, question)
                position += 1
        return index

    def build_profile(self, user_id: str) -> UserProfile:
        responses = self._responses.list_responses(user_id)
        index = self._question_index()
        chosen: Dict[str, Tuple[int, Question, Any]] = {}
        skipped = 0
        for response in responses:
            entry = index.get(response.question_id)
            if entry is None:
                skipped += 1
                continue
            position, question = entry
            candidate = (position, question, response.response)
            held = chosen.get(question.slug)
            if held is not None:
                winner, loser = (held, candidate) if held[0] < position else (candidate, held)
                logger.warning(
                    "profile_slug_collision slug=%s kept_question=%s skipped_question=%s",
                    question.slug,
                    winner[1].id,
                    loser[1].id,
                )
                candidate = winner
            chosen[question.slug] = candidate
        if skipped:
            logger.debug("profile_stale_responses user_id=%s skipped=%s", user_id, skipped)
        return {slug: value for slug, (_, _, value) in chosen.items()}


__all__ = ["ProfileProjector"]
