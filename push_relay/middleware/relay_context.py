"""
Middleware that binds the relay logging context for each request.

The request ID is taken from X-Request-ID or generated, and echoed back on
the response. Requests under the relay prefix also bind the device token
suffix and Content-Encoding so translator and APNs log lines can be tied
to the subscription that triggered them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware

from push_relay.utils.relay_context import (
    bind_relay_context,
    is_relay_path,
    new_request_id,
    reset_relay_context,
    token_suffix,
)

if TYPE_CHECKING:
    from fastapi import Request
    from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

_PROBE_PATHS = ("/ping", "/health")


class RelayContextMiddleware(BaseHTTPMiddleware):
    """Bind request ID, token suffix and Content-Encoding for log correlation."""

    def __init__(self, app: ASGIApp, relay_prefix: str = "/relay-to") -> None:
        super().__init__(app)
        self.relay_prefix = relay_prefix

    async def dispatch(self, request: Request, call_next):  # type: ignore[no-untyped-def]
        # Push services may already send one
        request_id = request.headers.get("X-Request-ID") or new_request_id()
        path = request.url.path
        is_relay = is_relay_path(path, self.relay_prefix)

        token = bind_relay_context(
            request_id,
            token_suffix=token_suffix(path, self.relay_prefix),
            content_encoding=request.headers.get("Content-Encoding") if is_relay else None,
        )

        should_log = is_relay or not path.startswith(_PROBE_PATHS)

        if is_relay:
            # Token suffix is already bound; the full path would leak the device token
            logger.info("Relaying Web Push request", extra={"method": request.method})
        elif should_log:
            logger.info(
                "Request started",
                extra={
                    "method": request.method,
                    "path": path,
                },
            )

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id

            if should_log:
                logger.info(
                    "Request completed",
                    extra={"status_code": response.status_code},
                )

            return response
        finally:
            reset_relay_context(token)
