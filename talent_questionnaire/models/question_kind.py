"""Question kinds and the response shape each one accepts.

Kinds form an open enumeration: stored questions keep their ``question_type``
string, and new kinds are added with ``register_question_kind`` without any
schema change. Each kind maps onto one of the fixed ``ValueShape`` families
that `talent_questionnaire.models.response_value` knows how to validate.
"""

from __future__ import annotations

from typing import Dict


class ValueShape:
    TEXT = "text"
    SELECT = "select"
    MULTISELECT = "multiselect"
    NUMBER = "number"
    BOOLEAN = "boolean"
    SCALE = "scale"
    DATE = "date"

    ALL = frozenset({TEXT, SELECT, MULTISELECT, NUMBER, BOOLEAN, SCALE, DATE})


class QuestionKind:
    TEXT = "text"
    TEXTAREA = "textarea"
    NUMBER = "number"
    SELECT = "select"
    MULTISELECT = "multiselect"
    BOOLEAN = "boolean"
    SCALE = "scale"
    DATE = "date"


_KIND_SHAPES: Dict[str, str] = {
    QuestionKind.TEXT: ValueShape.TEXT,
    QuestionKind.TEXTAREA: ValueShape.TEXT,
    QuestionKind.NUMBER: ValueShape.NUMBER,
    QuestionKind.SELECT: ValueShape.SELECT,
    QuestionKind.MULTISELECT: ValueShape.MULTISELECT,
    QuestionKind.BOOLEAN: ValueShape.BOOLEAN,
    QuestionKind.SCALE: ValueShape.SCALE,
    QuestionKind.DATE: ValueShape.DATE,
}

# Kinds whose answers are picked from the question's option list
OPTION_SHAPES = frozenset({ValueShape.SELECT, ValueShape.MULTISELECT})


def register_question_kind(name: str, shape: str) -> None:
    """Register (or re-map) a question kind onto an existing value shape."""
    key = str(name).strip().lower()
    if not key:
        raise ValueError("question kind name must be non-empty")
    if shape not in ValueShape.ALL:
        raise ValueError(f"unknown value shape {shape!r}; expected one of {sorted(ValueShape.ALL)}")
    _KIND_SHAPES[key] = shape


def is_known_kind(name: str) -> bool:
    return str(name).strip().lower() in _KIND_SHAPES


def shape_for_kind(name: str) -> str | None:
    return _KIND_SHAPES.get(str(name).strip().lower())


def known_kinds() -> list[str]:
    return sorted(_KIND_SHAPES)


def uses_options(name: str) -> bool:
    return shape_for_kind(name) in OPTION_SHAPES


__all__ = [
    "ValueShape",
    "QuestionKind",
    "OPTION_SHAPES",
    "register_question_kind",
    "is_known_kind",
    "shape_for_kind",
    "known_kinds",
    "uses_options",
]
