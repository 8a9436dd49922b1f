"""Access tier dependencies.

The upstream session layer authenticates the caller and forwards the
identity as ``X-User-Id`` and ``X-User-Role``. These dependencies turn the
headers into a ``Principal`` and enforce the route's tier before the handler
touches any repository.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Header, Request

from talent_questionnaire.logic.errors import AuthorizationError

logger = logging.getLogger(__name__)

ADMIN_ROLES = frozenset({"admin", "super_admin"})
SUPER_ADMIN_ROLE = "super_admin"


@dataclass(frozen=True)
class Principal:
    user_id: str
    role: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES

    @property
    def is_super_admin(self) -> bool:
        return self.role == SUPER_ADMIN_ROLE


def _principal(user_id: Optional[str], role: Optional[str]) -> Optional[Principal]:
    uid = (user_id or "").strip()
    if not uid:
        return None
    tag = (role or "").strip().lower() or None
    return Principal(user_id=uid, role=tag)


def require_user(
    request: Request,
    x_user_id: Optional[str] = Header(default=None, alias="X-User-Id"),
    x_user_role: Optional[str] = Header(default=None, alias="X-User-Role"),
) -> Principal:
    principal = _principal(x_user_id, x_user_role)
    if principal is None:
        logger.info("access_denied tier=user path=%s reason=unauthenticated", request.url.path)
        raise AuthorizationError("Authentication required")
    return principal


def require_admin(
    request: Request,
    x_user_id: Optional[str] = Header(default=None, alias="X-User-Id"),
    x_user_role: Optional[str] = Header(default=None, alias="X-User-Role"),
) -> Principal:
    principal = require_user(request, x_user_id, x_user_role)
    if not principal.is_admin:
        logger.info("access_denied tier=admin path=%s user_id=%s", request.url.path, principal.user_id)
        raise AuthorizationError("Admin access required")
    return principal


def require_super_admin(
    request: Request,
    x_user_id: Optional[str] = Header(default=None, alias="X-User-Id"),
    x_user_role: Optional[str] = Header(default=None, alias="X-User-Role"),
) -> Principal:
    principal = require_user(request, x_user_id, x_user_role)
    if not principal.is_super_admin:
        logger.info("access_denied tier=super_admin path=%s user_id=%s", request.url.path, principal.user_id)
        raise AuthorizationError("Super admin access required")
    return principal


__all__ = ["Principal", "require_user", "require_admin", "require_super_admin", "ADMIN_ROLES"]
