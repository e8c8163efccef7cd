"""Web Push relay endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response

from push_relay.config import Settings
from push_relay.dependencies import get_delivery_client, get_relay_settings
from push_relay.models.notification import InboundPushRequest
from push_relay.services.apn_service import PushDeliveryClient
from push_relay.services.delivery_result import interpret_outcome
from push_relay.services.translator import translate

router = APIRouter(tags=["relay"])


async def _relay(
    path: str,
    request: Request,
    delivery_client: PushDeliveryClient,
    settings: Settings,
) -> Response:
    inbound = InboundPushRequest.from_path(
        path,
        body=await request.body(),
        headers=request.headers,
    )

    notification = translate(
        inbound,
        alert_text=settings.alert_text,
        topic=settings.bundle_id,
    )

    outcome = await delivery_client.send(notification)

    result = interpret_outcome(
        notification,
        outcome,
        location_base=settings.location_base_url,
    )
    return Response(
        content=result.body,
        status_code=result.status_code,
        headers=result.headers,
    )


@router.post("", status_code=201, include_in_schema=False)
async def relay_push_without_target(
    request: Request,
    delivery_client: PushDeliveryClient = Depends(get_delivery_client),
    settings: Settings = Depends(get_relay_settings),
) -> Response:
    """The bare prefix addresses no device; answered like any other malformed path."""
    return await _relay("", request, delivery_client, settings)


@router.post("/{path:path}", status_code=201)
async def relay_push(
    path: str,
    request: Request,
    delivery_client: PushDeliveryClient = Depends(get_delivery_client),
    settings: Settings = Depends(get_relay_settings),
) -> Response:
    """
    Relay one Web Push message to APNs.

    The first path segment is the APNs device token; any further segments
    are passed to the app unchanged in the `x` field.

    Returns:
        - 201 with Location on success
        - APNs status and reason if APNs rejects the notification
        - 415 for an unsupported Content-Encoding
        - 500 for a malformed path, missing crypto parameters or transport errors
    """
    return await _relay(path, request, delivery_client, settings)
