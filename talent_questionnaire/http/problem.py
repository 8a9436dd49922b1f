"""Problem+JSON utilities and global exception handlers.

Every error leaving the API is an RFC 7807 ``application/problem+json``
body. Domain errors render through their own ``to_problem()``; batch
failures additionally carry the responses that were saved.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from talent_questionnaire.logic.errors import AggregateError, QuestionnaireError

PROBLEM_MEDIA_TYPE = "application/problem+json"

logger = logging.getLogger(__name__)


def problem_response(problem: dict, status: int, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(problem, status_code=status, media_type=PROBLEM_MEDIA_TYPE, headers=headers)


async def handle_questionnaire_error(request: Request, exc: QuestionnaireError) -> JSONResponse:
    logger.info(
        "request_failed method=%s path=%s status=%s code=%s",
        request.method,
        request.url.path,
        exc.status,
        exc.code,
    )
    return problem_response(exc.to_problem(), exc.status)


async def handle_aggregate_error(request: Request, exc: AggregateError) -> JSONResponse:
    problem = exc.to_problem()
    problem["saved"] = [
        s.model_dump(by_alias=True, mode="json") if hasattr(s, "model_dump") else jsonable_encoder(s)
        for s in exc.saved
    ]
    logger.info(
        "batch_failed path=%s failed=%s saved=%s", request.url.path, len(exc.failures), len(exc.saved)
    )
    return problem_response(problem, exc.status)


async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
    status = int(exc.status_code or 500)
    if isinstance(exc.detail, dict):
        problem = dict(exc.detail)
        problem.setdefault("status", status)
    else:
        problem = {"title": "Error", "status": status, "detail": str(exc.detail or "")}
    return problem_response(problem, status, headers=getattr(exc, "headers", None))


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    problem = {
        "title": "Invalid Request",
        "status": 422,
        "detail": "Request validation failed",
        "code": "REQUEST_INVALID",
        "errors": [
            {"path": "$." + ".".join(str(p) for p in e.get("loc", ())), "code": str(e.get("type", ""))}
            for e in exc.errors()
        ],
    }
    return problem_response(problem, 422)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("unexpected_error method=%s path=%s", request.method, request.url.path, exc_info=exc)
    return problem_response({"title": "Internal Server Error", "status": 500, "code": "INTERNAL_ERROR"}, 500)


__all__ = [
    "PROBLEM_MEDIA_TYPE",
    "problem_response",
    "handle_questionnaire_error",
    "handle_aggregate_error",
    "handle_http_exception",
    "handle_request_validation_error",
    "handle_unexpected_error",
]
