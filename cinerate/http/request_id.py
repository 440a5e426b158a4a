"""Request ID middleware.

Echoes an incoming `X-Request-Id` or assigns a fresh one, and logs one
completion line per HTTP request carrying that id.
"""

from __future__ import annotations

import logging
import time
import uuid

logger = logging.getLogger(__name__)


class RequestIdMiddleware:
    def __init__(self, app, header_name: str = "X-Request-Id") -> None:  # type: ignore[no-untyped-def]
        self.app = app
        self.header_name = header_name

    def _incoming(self, scope) -> str:  # type: ignore[no-untyped-def]
        wanted = self.header_name.lower().encode("latin-1")
        for key, value in scope.get("headers") or []:
            if key.lower() == wanted and value:
                return value.decode("latin-1")
        return str(uuid.uuid4())

    async def __call__(self, scope, receive, send):  # type: ignore[no-untyped-def]
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        request_id = self._incoming(scope)
        started = time.perf_counter()
        status = {"code": 500}

        async def send_wrapper(message):  # type: ignore[no-untyped-def]
            if message.get("type") == "http.response.start":
                status["code"] = int(message.get("status") or 500)
                headers = [(k, v) for k, v in (message.get("headers") or []) if k.lower() != self.header_name.lower().encode("latin-1")]
                headers.append((self.header_name.encode("latin-1"), request_id.encode("latin-1")))
                message = {**message, "headers": headers}
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            logger.info(
                "request_completed method=%s path=%s status=%s request_id=%s duration_ms=%.1f",
                scope.get("method"),
                scope.get("path"),
                status["code"],
                request_id,
                (time.perf_counter() - started) * 1000,
            )


__all__ = ["RequestIdMiddleware"]
