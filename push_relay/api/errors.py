"""Translation of relay exceptions into plain-text HTTP responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from push_relay.exceptions import RelayError

logger = logging.getLogger(__name__)


async def relay_error_handler(request: Request, exc: RelayError) -> PlainTextResponse:
    """One log line and one response per failed relay request."""
    level = logging.WARNING if exc.status_code < 500 else logging.ERROR
    logger.log(
        level,
        str(exc),
        extra={
            **exc.context,
            "path": request.url.path,
            "status_code": exc.status_code,
            "error_type": type(exc).__name__,
        },
    )
    return PlainTextResponse(f"{exc}\n", status_code=exc.status_code)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RelayError, relay_error_handler)  # type: ignore[arg-type]
