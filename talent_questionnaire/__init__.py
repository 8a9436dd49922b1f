"""FastAPI application package for the talent questionnaire service.

The service stores questionnaire categories, the questions inside them and
one response per (user, question) pair, and projects a user's responses into
a flat ``slug -> value`` profile. Business logic lives in
`talent_questionnaire/logic/` and route handlers in
`talent_questionnaire/routes/`.
"""

from __future__ import annotations

from talent_questionnaire.main import create_app

__all__ = ["create_app"]
