"""Field-level validation shared by the registries.

Raises the domain ``ValidationError`` with the offending field names so the
API boundary can point at them.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import BaseModel

from talent_questionnaire.logic.errors import ValidationError

_SLUG_RE = re.compile(r"^[a-z0-9]+(?:[_-][a-z0-9]+)*$")


def input_fields(data: Any, *, partial: bool) -> Dict[str, Any]:
    """Turn a pydantic input model or a plain mapping into snake_case fields.

    For partial updates only explicitly supplied fields are returned.
    """
    if isinstance(data, BaseModel):
        return data.model_dump(exclude_unset=partial, by_alias=False)
    if isinstance(data, Mapping):
        return dict(data)
    raise ValidationError("payload must be an object")


def require_text(fields: Mapping[str, Any], name: str) -> Optional[str]:
    """Strip a text field; fail when present but blank."""
    if name not in fields:
        return None
    value = fields[name]
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{name} must be a non-empty string", fields=[name])
    return value.strip()


def validate_slug(slug: Any, *, field: str = "slug") -> str:
    if not isinstance(slug, str) or not slug.strip():
        raise ValidationError(f"{field} must be a non-empty string", fields=[field])
    slug = slug.strip()
    if not _SLUG_RE.match(slug):
        raise ValidationError(
            f"{field} must be lowercase letters, digits, '_' or '-' (got {slug!r})", fields=[field]
        )
    return slug


def normalize_roles(roles: Optional[Iterable[Any]]) -> List[str]:
    """Deduplicate role tags, preserving order; empty means every role."""
    if roles is None:
        return []
    if isinstance(roles, (str, bytes)):
        raise ValidationError("targetRoles must be a list of role names", fields=["target_roles"])
    out: List[str] = []
    for role in roles:
        if not isinstance(role, str) or not role.strip():
            raise ValidationError("targetRoles entries must be non-empty strings", fields=["target_roles"])
        tag = role.strip()
        if tag not in out:
            out.append(tag)
    return out


__all__ = ["input_fields", "require_text", "validate_slug", "normalize_roles"]
