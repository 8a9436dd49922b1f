"""Category registry.

Owns the ``questionnaire_categories`` table through an injected
``OrderedStore``. Slugs are unique among active categories; the partial
unique index enforces the same rule in the database.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence

from sqlalchemy.engine import Engine

from talent_questionnaire.logic.errors import ConflictError, NotFoundError
from talent_questionnaire.logic.events import CATEGORY_DEACTIVATED, publish
from talent_questionnaire.logic.ordered_store import OrderedStore, Record, TableSpec
from talent_questionnaire.logic.validation import input_fields, normalize_roles, require_text, validate_slug
from talent_questionnaire.models.category import Category

logger = logging.getLogger(__name__)

CATEGORY_TABLE = TableSpec(
    table="questionnaire_categories",
    columns=("name", "slug", "description", "target_roles", "is_active", "sort_order"),
    required=("name", "slug"),
    json_columns=frozenset({"target_roles"}),
    bool_columns=frozenset({"is_active"}),
    defaults={"is_active": True, "sort_order": 0},
    sort_key="sort_order",
    tie_break_key="name",
)


def _to_category(rec: Record) -> Category:
    data = dict(rec)
    data["target_roles"] = data.get("target_roles") or []
    return Category.model_validate(data)


class CategoryRegistry:
    def __init__(self, store: OrderedStore) -> None:
        self._store = store

    @classmethod
    def for_engine(cls, engine: Engine) -> "CategoryRegistry":
        return cls(OrderedStore(engine, CATEGORY_TABLE))

    def _clean(self, fields: dict) -> dict:
        if "name" in fields:
            fields["name"] = require_text(fields, "name")
        if "slug" in fields:
            fields["slug"] = validate_slug(fields["slug"])
        if "target_roles" in fields:
            fields["target_roles"] = normalize_roles(fields["target_roles"])
        for key in ("is_active", "sort_order"):
            if key in fields and fields[key] is None:
                fields.pop(key)
        return fields

    def _active_slug_owner(self, slug: str) -> Optional[Record]:
        rows = self._store.list_ordered({"slug": slug})
        return rows[0] if rows else None

    def create_category(self, data: Any) -> Category:
        fields = self._clean(input_fields(data, partial=False))
        slug = fields.get("slug")
        if slug and fields.get("is_active", True) and self._active_slug_owner(slug) is not None:
            raise ConflictError(f"category slug {slug!r} already exists", fields=["slug"])
        rec = self._store.insert(fields)
        logger.info("category_created id=%s slug=%s", rec["id"], rec["slug"])
        return _to_category(rec)

    def update_category(self, category_id: int, data: Any) -> Category:
        current = self._store.get_by_id(category_id)
        if current is None:
            raise NotFoundError(f"category {category_id} not found")
        fields = self._clean(input_fields(data, partial=True))
        target_slug = fields.get("slug", current["slug"])
        will_be_active = fields.get("is_active", current["is_active"])
        slug_touched = "slug" in fields and fields["slug"] != current["slug"]
        reactivated = will_be_active and not current["is_active"]
        if will_be_active and (slug_touched or reactivated):
            owner = self._active_slug_owner(target_slug)
            if owner is not None and int(owner["id"]) != int(category_id):
                raise ConflictError(f"category slug {target_slug!r} already exists", fields=["slug"])
        rec = self._store.update(category_id, fields)
        logger.info("category_updated id=%s fields=%s", category_id, sorted(fields))
        return _to_category(rec)

    def deactivate_category(self, category_id: int) -> None:
        """Soft-delete; questions and responses under it are left untouched."""
        self._store.soft_delete(category_id)
        logger.info("category_deactivated id=%s", category_id)
        publish(CATEGORY_DEACTIVATED, {"category_id": int(category_id)})

    def list_categories(self, for_role: Optional[str] = None) -> List[Category]:
        categories = [_to_category(r) for r in self._store.list_ordered()]
        if for_role:
            categories = [c for c in categories if c.applies_to(for_role)]
        return categories

    def get_category_by_id(self, category_id: int) -> Optional[Category]:
        rec = self._store.get_by_id(category_id)
        return _to_category(rec) if rec else None

    def get_category_by_slug(self, slug: str) -> Optional[Category]:
        """Return the active category holding ``slug``, if any."""
        rec = self._active_slug_owner(str(slug).strip())
        return _to_category(rec) if rec else None

    def reorder_categories(self, ids_in_new_order: Sequence[int]) -> List[Category]:
        return [_to_category(r) for r in self._store.reorder(ids_in_new_order)]


__all__ = ["CategoryRegistry", "CATEGORY_TABLE"]
