"""Request-scoped access to the application's services."""

from __future__ import annotations

from fastapi import Request

from talent_questionnaire.logic.services import Services


def get_services(request: Request) -> Services:
    return request.app.state.services


__all__ = ["get_services"]
