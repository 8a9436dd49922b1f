"""Response data access.

At most one row exists per ``(user_id, question_id)``; saves go through a
single ``INSERT ... ON CONFLICT DO UPDATE`` against that unique constraint so
concurrent writers to the same pair serialize in the database and the last
one wins. Values are validated against the question's kind before the write
and persisted exactly as submitted.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional

from pydantic import BaseModel
from sqlalchemy.engine import Engine

from talent_questionnaire.logic.errors import (
    AggregateError,
    BatchFailure,
    NotFoundError,
    QuestionnaireError,
    ValidationError,
)
from talent_questionnaire.logic.events import RESPONSE_DELETED, RESPONSE_SAVED, publish
from talent_questionnaire.logic.ordered_store import OrderedStore, Record, TableSpec
from talent_questionnaire.logic.repository_questions import QuestionRegistry
from talent_questionnaire.models.response import QuestionnaireResponse
from talent_questionnaire.models.response_value import parse_response_value

logger = logging.getLogger(__name__)

RESPONSE_TABLE = TableSpec(
    table="questionnaire_responses",
    columns=("user_id", "question_id", "response"),
    required=("user_id", "question_id"),
    json_columns=frozenset({"response"}),
    active_column=None,
    sort_key="updated_at",
    tie_break_key="id",
)


def _to_response(rec: Record) -> QuestionnaireResponse:
    return QuestionnaireResponse.model_validate(rec)


def _require_user(user_id: Any) -> str:
    if not isinstance(user_id, str) or not user_id.strip():
        raise ValidationError("user id must be a non-empty string", fields=["user_id"])
    return user_id.strip()


class ResponseStore:
    def __init__(self, store: OrderedStore, questions: QuestionRegistry) -> None:
        self._store = store
        self._questions = questions

    @classmethod
    def for_engine(cls, engine: Engine, questions: QuestionRegistry | None = None) -> "ResponseStore":
        return cls(OrderedStore(engine, RESPONSE_TABLE), questions or QuestionRegistry.for_engine(engine))

    def get_response(self, user_id: str, question_id: int) -> Optional[QuestionnaireResponse]:
        rows = self._store.list_ordered({"user_id": _require_user(user_id), "question_id": int(question_id)})
        return _to_response(rows[0]) if rows else None

    def list_responses(self, user_id: str) -> List[QuestionnaireResponse]:
        """All of a user's responses, most recently updated first."""
        rows = self._store.list_ordered({"user_id": _require_user(user_id)}, descending=True)
        return [_to_response(r) for r in rows]

    def list_responses_by_category(self, user_id: str, category_id: int) -> List[QuestionnaireResponse]:
        """Responses to the category's active questions, in question display order."""
        questions = self._questions.list_questions_by_category(int(category_id))
        if not questions:
            return []
        rows = self._store.list_ordered(
            {"user_id": _require_user(user_id), "question_id": [q.id for q in questions]}
        )
        by_question = {int(r["question_id"]): r for r in rows}
        return [_to_response(by_question[q.id]) for q in questions if q.id in by_question]

    def save_response(self, user_id: str, question_id: int, value: Any) -> QuestionnaireResponse:
        uid = _require_user(user_id)
        question = self._questions.get_question_by_id(int(question_id))
        if question is None:
            raise NotFoundError(f"question {question_id} not found", fields=["question_id"])
        if not question.is_active:
            raise ValidationError(f"question {question_id} is no longer active", fields=["question_id"])
        parse_response_value(question.question_type, value, question.option_values())
        rec = self._store.upsert(
            {"user_id": uid, "question_id": question.id, "response": value},
            conflict_columns=("user_id", "question_id"),
        )
        saved = _to_response(rec)
        logger.info("response_saved user_id=%s question_id=%s id=%s", uid, question.id, saved.id)
        publish(RESPONSE_SAVED, {"user_id": uid, "question_id": question.id})
        return saved

    def save_multiple_responses(self, user_id: str, entries: Iterable[Any]) -> List[QuestionnaireResponse]:
        """Save each entry in order; earlier writes stay committed if a later one fails.

        Every entry is attempted. When any failed, ``AggregateError`` is raised
        carrying the per-entry failures and the responses that were saved.
        """
        uid = _require_user(user_id)
        saved: List[QuestionnaireResponse] = []
        failures: List[BatchFailure] = []
        for index, entry in enumerate(entries):
            if isinstance(entry, BaseModel):
                entry = entry.model_dump()
            if not isinstance(entry, Mapping):
                entry = {}
            question_id = entry.get("question_id", entry.get("questionId"))
            try:
                if question_id is None:
                    raise ValidationError("questionId is required", fields=["question_id"])
                saved.append(self.save_response(uid, question_id, entry.get("response")))
            except QuestionnaireError as exc:
                logger.warning(
                    "response_batch_entry_failed user_id=%s index=%s code=%s", uid, index, exc.code
                )
                failures.append(BatchFailure(index, question_id, exc))
        if failures:
            raise AggregateError(failures, saved)
        return saved

    def delete_response(self, user_id: str, question_id: int) -> bool:
        """Remove the pair's response; returns whether a row existed."""
        uid = _require_user(user_id)
        removed = self._store.delete_where({"user_id": uid, "question_id": int(question_id)})
        if removed:
            logger.info("response_deleted user_id=%s question_id=%s", uid, question_id)
            publish(RESPONSE_DELETED, {"user_id": uid, "question_id": int(question_id)})
        return bool(removed)


__all__ = ["ResponseStore", "RESPONSE_TABLE"]
