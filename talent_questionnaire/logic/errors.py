"""Domain error taxonomy for the questionnaire service.

Each error carries a stable ``code`` and the HTTP status it renders as at
the API boundary (see `talent_questionnaire.http.problem`). Nothing in the
logic layer recovers from these; they propagate to the route handlers.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence


class QuestionnaireError(Exception):
    """Base class for all domain errors."""

    status: int = 500
    title: str = "Internal Server Error"
    code: str = "QUESTIONNAIRE_ERROR"

    def __init__(self, detail: str, *, fields: Optional[Sequence[str]] = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.fields: List[str] = list(fields or [])

    def to_problem(self) -> Dict[str, Any]:
        problem: Dict[str, Any] = {
            "title": self.title,
            "status": self.status,
            "detail": self.detail,
            "code": self.code,
        }
        if self.fields:
            problem["errors"] = [{"path": f"$.{f}", "code": self.code} for f in self.fields]
        return problem


class ValidationError(QuestionnaireError):
    status = 400
    title = "Validation error"
    code = "VALIDATION_FAILED"


class ConflictError(QuestionnaireError):
    status = 409
    title = "Conflict"
    code = "SLUG_CONFLICT"


class NotFoundError(QuestionnaireError):
    status = 404
    title = "Not Found"
    code = "NOT_FOUND"


class AuthorizationError(QuestionnaireError):
    status = 401
    title = "Unauthorized"
    code = "AUTHORIZATION_REQUIRED"


class BatchFailure:
    """One failed entry of a batch save, by position in the submitted list."""

    def __init__(self, index: int, question_id: Any, error: QuestionnaireError) -> None:
        self.index = index
        self.question_id = question_id
        self.error = error

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "questionId": self.question_id,
            "code": self.error.code,
            "status": self.error.status,
            "detail": self.error.detail,
        }


class AggregateError(QuestionnaireError):
    """Raised by batch saves when one or more entries failed.

    ``saved`` holds the entries written before and after the failures; those
    writes are already committed.
    """

    status = 400
    title = "Batch save failed"
    code = "BATCH_PARTIAL_FAILURE"

    def __init__(self, failures: Sequence[BatchFailure], saved: Sequence[Any]) -> None:
        super().__init__(f"{len(failures)} of {len(failures) + len(saved)} responses failed to save")
        self.failures = list(failures)
        self.saved = list(saved)

    def to_problem(self) -> Dict[str, Any]:
        problem = super().to_problem()
        problem["errors"] = [f.to_dict() for f in self.failures]
        return problem


__all__ = [
    "QuestionnaireError",
    "ValidationError",
    "ConflictError",
    "NotFoundError",
    "AuthorizationError",
    "BatchFailure",
    "AggregateError",
]
