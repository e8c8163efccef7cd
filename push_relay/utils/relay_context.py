"""
Per-request logging context for relayed pushes.

One Web Push delivery crosses the middleware, translator, APNs client and
error handlers. The context bound here lets every log line of that delivery
carry the same request ID, device token suffix and Content-Encoding
without each call site passing them in `extra=`.
"""

from __future__ import annotations

import contextvars
import uuid
from dataclasses import dataclass

TOKEN_SUFFIX_LENGTH = 6


@dataclass(frozen=True)
class RelayLogContext:
    request_id: str
    token_suffix: str | None = None
    content_encoding: str | None = None


relay_context_var: contextvars.ContextVar[RelayLogContext | None] = contextvars.ContextVar(
    "relay_context",
    default=None,
)


def new_request_id() -> str:
    """Generate a request ID (uuid4 hex, no dashes)."""
    return uuid.uuid4().hex


def is_relay_path(path: str, relay_prefix: str) -> bool:
    return path == relay_prefix or path.startswith(relay_prefix + "/")


def token_suffix(path: str, relay_prefix: str) -> str | None:
    """Last characters of the device token addressed by a relay path.

    Returns None for paths outside the relay prefix or without a token.
    """
    if not is_relay_path(path, relay_prefix):
        return None
    target, _, _ = path[len(relay_prefix):].lstrip("/").partition("/")
    return target[-TOKEN_SUFFIX_LENGTH:] or None


def bind_relay_context(
    request_id: str,
    *,
    token_suffix: str | None = None,
    content_encoding: str | None = None,
) -> contextvars.Token[RelayLogContext | None]:
    """Bind the context for the current request; pass the token to reset_relay_context."""
    return relay_context_var.set(
        RelayLogContext(
            request_id=request_id,
            token_suffix=token_suffix,
            content_encoding=content_encoding,
        )
    )


def current_relay_context() -> RelayLogContext | None:
    return relay_context_var.get()


def reset_relay_context(token: contextvars.Token[RelayLogContext | None]) -> None:
    relay_context_var.reset(token)
