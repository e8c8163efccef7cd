"""Liveness endpoints."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from push_relay.version import get_version

router = APIRouter(tags=["health"])


@router.get("/ping", response_class=PlainTextResponse)
async def ping() -> str:
    """Liveness probe with a fixed body."""
    return "pong"


@router.get("/health")
async def health() -> dict[str, str]:
    """
    Simple health check for liveness probe.

    Does not contact APNs; delivery failures surface per request.
    """
    return {"status": "ok", "version": get_version()}
