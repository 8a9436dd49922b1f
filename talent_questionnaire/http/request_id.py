"""X-Request-Id propagation.

The caller's id is echoed when present, otherwise a uuid4 is assigned. The
id is stored on ``request.state`` and in the logging context for the
duration of the request.
"""

from __future__ import annotations

import uuid

from talent_questionnaire.logging_setup import request_id_var

REQUEST_ID_HEADER = "X-Request-Id"


class RequestIdMiddleware:
    def __init__(self, app, header_name: str = REQUEST_ID_HEADER) -> None:  # type: ignore[no-untyped-def]
        self.app = app
        self.header_name = header_name
        self._raw_name = header_name.lower().encode("latin-1")

    def _from_headers(self, scope) -> str | None:  # type: ignore[no-untyped-def]
        for key, value in scope.get("headers") or []:
            if key.lower() == self._raw_name:
                return value.decode("latin-1").strip() or None
        return None

    async def __call__(self, scope, receive, send):  # type: ignore[no-untyped-def]
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        request_id = self._from_headers(scope) or str(uuid.uuid4())
        scope.setdefault("state", {})["request_id"] = request_id
        token = request_id_var.set(request_id)

        async def stamp(message):  # type: ignore[no-untyped-def]
            if message.get("type") == "http.response.start":
                headers = [(k, v) for k, v in message.get("headers") or [] if k.lower() != self._raw_name]
                headers.append((self.header_name.encode("latin-1"), request_id.encode("latin-1")))
                message = {**message, "headers": headers}
            await send(message)

        try:
            await self.app(scope, receive, stamp)
        finally:
            request_id_var.reset(token)


__all__ = ["RequestIdMiddleware", "REQUEST_ID_HEADER"]
