"""Question registry.

Questions belong to exactly one category (``category_id`` is immutable after
creation) and carry a slug that is unique among the active questions of that
category. Listings are active-only and hide questions whose category has
been deactivated; ``get_question_by_id`` still returns any row.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from pydantic import BaseModel
from sqlalchemy.engine import Engine

from talent_questionnaire.logic.errors import ConflictError, NotFoundError, ValidationError
from talent_questionnaire.logic.events import QUESTION_DEACTIVATED, publish
from talent_questionnaire.logic.ordered_store import OrderedStore, Record, TableSpec
from talent_questionnaire.logic.repository_categories import CategoryRegistry
from talent_questionnaire.logic.validation import input_fields, require_text, validate_slug
from talent_questionnaire.models.question import Question
from talent_questionnaire.models.question_kind import is_known_kind, known_kinds, uses_options

logger = logging.getLogger(__name__)

QUESTION_TABLE = TableSpec(
    table="questionnaire_questions",
    columns=(
        "category_id",
        "question",
        "slug",
        "question_type",
        "options",
        "is_required",
        "is_active",
        "sort_order",
        "help_text",
    ),
    required=("category_id", "question", "slug", "question_type"),
    json_columns=frozenset({"options"}),
    bool_columns=frozenset({"is_required", "is_active"}),
    defaults={"is_active": True, "is_required": False, "sort_order": 0, "options": []},
    sort_key="sort_order",
    tie_break_key="question",
)


def _to_question(rec: Record) -> Question:
    data = dict(rec)
    data["options"] = data.get("options") or []
    return Question.model_validate(data)


def _normalize_options(options: Any) -> List[Dict[str, Any]]:
    if options is None:
        return []
    if not isinstance(options, (list, tuple)):
        raise ValidationError("options must be a list of {value, label} objects", fields=["options"])
    out: List[Dict[str, Any]] = []
    seen: set[str] = set()
    for opt in options:
        if isinstance(opt, BaseModel):
            opt = opt.model_dump(exclude_none=True)
        if not isinstance(opt, dict):
            raise ValidationError("options must be a list of {value, label} objects", fields=["options"])
        value = opt.get("value")
        label = opt.get("label", value)
        if not isinstance(value, str) or not value.strip():
            raise ValidationError("every option needs a non-empty string value", fields=["options"])
        if not isinstance(label, str) or not label.strip():
            raise ValidationError("every option needs a non-empty string label", fields=["options"])
        if value in seen:
            raise ValidationError(f"duplicate option value {value!r}", fields=["options"])
        seen.add(value)
        entry: Dict[str, Any] = {"value": value, "label": label}
        if opt.get("description"):
            entry["description"] = str(opt["description"])
        out.append(entry)
    return out


class QuestionRegistry:
    def __init__(self, store: OrderedStore, categories: CategoryRegistry) -> None:
        self._store = store
        self._categories = categories

    @classmethod
    def for_engine(cls, engine: Engine, categories: CategoryRegistry | None = None) -> "QuestionRegistry":
        return cls(OrderedStore(engine, QUESTION_TABLE), categories or CategoryRegistry.for_engine(engine))

    def _clean(self, fields: dict) -> dict:
        if "question" in fields:
            fields["question"] = require_text(fields, "question")
        if "slug" in fields:
            fields["slug"] = validate_slug(fields["slug"])
        if "question_type" in fields:
            qtype = require_text(fields, "question_type")
            qtype = qtype.lower() if qtype else qtype
            if not is_known_kind(qtype):
                raise ValidationError(
                    f"unknown question type {qtype!r}; expected one of {known_kinds()}",
                    fields=["question_type"],
                )
            fields["question_type"] = qtype
        if "options" in fields:
            fields["options"] = _normalize_options(fields["options"])
        for key in ("is_active", "is_required", "sort_order"):
            if key in fields and fields[key] is None:
                fields.pop(key)
        return fields

    def _active_slug_owner(self, category_id: int, slug: str) -> Optional[Record]:
        rows = self._store.list_ordered({"category_id": int(category_id), "slug": slug})
        return rows[0] if rows else None

    def _warn_if_incomplete(self, question: Question) -> None:
        if not question.is_complete:
            logger.warning(
                "question_incomplete id=%s type=%s has no options", question.id, question.question_type
            )

    def create_question(self, data: Any) -> Question:
        """Create a question; the category may be active or inactive."""
        fields = self._clean(input_fields(data, partial=False))
        category_id = fields.get("category_id")
        if category_id is None:
            raise ValidationError("category_id is required", fields=["category_id"])
        if self._categories.get_category_by_id(int(category_id)) is None:
            raise NotFoundError(f"category {category_id} not found", fields=["category_id"])
        slug = fields.get("slug")
        if slug and fields.get("is_active", True) and self._active_slug_owner(category_id, slug) is not None:
            raise ConflictError(
                f"question slug {slug!r} already exists in category {category_id}", fields=["slug"]
            )
        question = _to_question(self._store.insert(fields))
        logger.info(
            "question_created id=%s category_id=%s slug=%s", question.id, question.category_id, question.slug
        )
        self._warn_if_incomplete(question)
        return question

    def update_question(self, question_id: int, data: Any) -> Question:
        raw = input_fields(data, partial=True)
        if "category_id" in raw:
            raise ValidationError("category_id cannot be changed after creation", fields=["category_id"])
        current = self._store.get_by_id(question_id)
        if current is None:
            raise NotFoundError(f"question {question_id} not found")
        fields = self._clean(raw)
        target_slug = fields.get("slug", current["slug"])
        will_be_active = fields.get("is_active", current["is_active"])
        slug_touched = "slug" in fields and fields["slug"] != current["slug"]
        reactivated = will_be_active and not current["is_active"]
        if will_be_active and (slug_touched or reactivated):
            owner = self._active_slug_owner(current["category_id"], target_slug)
            if owner is not None and int(owner["id"]) != int(question_id):
                raise ConflictError(
                    f"question slug {target_slug!r} already exists in category {current['category_id']}",
                    fields=["slug"],
                )
        question = _to_question(self._store.update(question_id, fields))
        logger.info("question_updated id=%s fields=%s", question_id, sorted(fields))
        self._warn_if_incomplete(question)
        return question

    def deactivate_question(self, question_id: int) -> None:
        """Soft-delete; stored responses are kept."""
        self._store.soft_delete(question_id)
        logger.info("question_deactivated id=%s", question_id)
        publish(QUESTION_DEACTIVATED, {"question_id": int(question_id)})

    def list_questions_by_category(self, category_id: int) -> List[Question]:
        category = self._categories.get_category_by_id(int(category_id))
        if category is None or not category.is_active:
            return []
        return [_to_question(r) for r in self._store.list_ordered({"category_id": int(category_id)})]

    def list_questions_for_categories(self, category_ids: Iterable[int]) -> Dict[int, List[Question]]:
        """Active questions grouped by category, each group in display order.

        Callers pass ids of categories they already know to be active.
        """
        ids = [int(i) for i in category_ids]
        grouped: Dict[int, List[Question]] = {i: [] for i in ids}
        for rec in self._store.list_ordered({"category_id": ids}):
            grouped[int(rec["category_id"])].append(_to_question(rec))
        return grouped

    def get_question_by_id(self, question_id: int) -> Optional[Question]:
        rec = self._store.get_by_id(question_id)
        return _to_question(rec) if rec else None

    def get_question_by_slug(self, category_id: int, slug: str) -> Optional[Question]:
        rec = self._active_slug_owner(int(category_id), str(slug).strip())
        return _to_question(rec) if rec else None

    def reorder_questions(self, category_id: int, ids_in_new_order: Sequence[int]) -> List[Question]:
        if self._categories.get_category_by_id(int(category_id)) is None:
            raise NotFoundError(f"category {category_id} not found", fields=["category_id"])
        rows = self._store.reorder(ids_in_new_order, {"category_id": int(category_id)})
        return [_to_question(r) for r in rows]


__all__ = ["QuestionRegistry", "QUESTION_TABLE", "uses_options"]
