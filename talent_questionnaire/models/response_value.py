"""Typed response values, one variant per value shape.

A submitted response is validated as ``{"kind": <shape>, "value": <raw>}``
against a discriminated union, so a ``multiselect`` question cannot receive
a scalar and a ``number`` question cannot receive text. Field types are
strict: no coercion of ``"5"`` into ``5`` or ``1`` into ``"1"``. The raw
value is what gets persisted; the typed variant only gates the write.
"""

from __future__ import annotations

import math
from datetime import date
from typing import Annotated, Any, Iterable, List, Literal, Union

from pydantic import BaseModel, Field, StrictBool, StrictFloat, StrictInt, StrictStr, TypeAdapter, conint, field_validator
from pydantic import ValidationError as PydanticValidationError

from talent_questionnaire.logic.errors import ValidationError
from talent_questionnaire.models.question_kind import OPTION_SHAPES, ValueShape, shape_for_kind


class TextValue(BaseModel):
    kind: Literal["text"] = ValueShape.TEXT
    value: StrictStr


class SelectValue(BaseModel):
    kind: Literal["select"] = ValueShape.SELECT
    value: StrictStr


class MultiSelectValue(BaseModel):
    kind: Literal["multiselect"] = ValueShape.MULTISELECT
    value: List[StrictStr]


class NumberValue(BaseModel):
    kind: Literal["number"] = ValueShape.NUMBER
    value: Union[StrictInt, StrictFloat]

    @field_validator("value")
    @classmethod
    def must_be_finite(cls, v: Union[int, float]) -> Union[int, float]:
        if isinstance(v, float) and not math.isfinite(v):
            raise ValueError("number must be finite")
        return v


class BooleanValue(BaseModel):
    kind: Literal["boolean"] = ValueShape.BOOLEAN
    value: StrictBool


class ScaleValue(BaseModel):
    kind: Literal["scale"] = ValueShape.SCALE
    value: conint(strict=True, ge=1, le=10)  # type: ignore[valid-type]


class DateValue(BaseModel):
    kind: Literal["date"] = ValueShape.DATE
    value: StrictStr

    @field_validator("value")
    @classmethod
    def must_be_iso_date(cls, v: str) -> str:
        if len(v) != 10:
            raise ValueError("date must be formatted YYYY-MM-DD")
        date.fromisoformat(v)
        return v


ResponseValue = Annotated[
    Union[TextValue, SelectValue, MultiSelectValue, NumberValue, BooleanValue, ScaleValue, DateValue],
    Field(discriminator="kind"),
]

_ADAPTER: TypeAdapter = TypeAdapter(ResponseValue)


def _first_error(exc: PydanticValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    err = errors[0]
    return str(err.get("msg") or err.get("type") or "invalid value")


def parse_response_value(question_type: str, value: Any, option_values: Iterable[str] = ()) -> ResponseValue:
    """Validate ``value`` against the shape of ``question_type``.

    For option-backed shapes the chosen value(s) must be among
    ``option_values`` whenever the question defines options.
    Raises the domain ``ValidationError`` on any mismatch.
    """
    shape = shape_for_kind(question_type)
    if shape is None:
        raise ValidationError(f"unsupported question type {question_type!r}", fields=["questionType"])
    try:
        typed = _ADAPTER.validate_python({"kind": shape, "value": value})
    except PydanticValidationError as exc:
        raise ValidationError(
            f"response does not match question type {question_type!r}: {_first_error(exc)}",
            fields=["response"],
        ) from exc

    allowed = [str(v) for v in option_values]
    if shape in OPTION_SHAPES and allowed:
        chosen = typed.value if isinstance(typed.value, list) else [typed.value]
        invalid = [c for c in chosen if c not in allowed]
        if invalid:
            raise ValidationError(
                f"response contains values that are not options of this question: {invalid}",
                fields=["response"],
            )
    return typed


__all__ = [
    "TextValue",
    "SelectValue",
    "MultiSelectValue",
    "NumberValue",
    "BooleanValue",
    "ScaleValue",
    "DateValue",
    "ResponseValue",
    "parse_response_value",
]
