"""Mapping of APNs delivery outcomes onto relay HTTP responses."""

from __future__ import annotations

import logging

from push_relay.exceptions import CollaboratorRejectedError
from push_relay.models.notification import DeliveryOutcome, OutboundNotification, RelayResponse

logger = logging.getLogger(__name__)

DEFAULT_LOCATION_BASE = "https://not-supported"


def interpret_outcome(
    notification: OutboundNotification,
    outcome: DeliveryOutcome,
    *,
    location_base: str = DEFAULT_LOCATION_BASE,
) -> RelayResponse:
    """
    Turn a delivery outcome into the response for the Web Push sender.

    Args:
        notification: The notification that was delivered
        outcome: What APNs answered
        location_base: Prefix of the Location header (Web Push message URL)

    Returns:
        201 RelayResponse with Location pointing at the apns-id

    Raises:
        CollaboratorRejectedError: If APNs refused the notification
    """
    if not outcome.accepted:
        logger.warning(
            "Failed to send: %s %s %s",
            outcome.status_code,
            outcome.delivery_id,
            outcome.reason_text,
        )
        raise CollaboratorRejectedError(
            outcome.reason_text or "",
            status_code=outcome.status_code,
            context={
                "status_code": outcome.status_code,
                "delivery_id": outcome.delivery_id,
            },
        )

    logger.info(
        "Sent notification to ...%s",
        notification.device_token[-6:],
        extra={
            "status_code": outcome.status_code,
            "delivery_id": outcome.delivery_id,
            "expiration": notification.expiration.isoformat() if notification.expiration else None,
            "priority": notification.priority.value,
            "collapse_id": notification.collapse_key,
        },
    )

    return RelayResponse(
        status_code=201,
        headers={"Location": f"{location_base.rstrip('/')}/{outcome.delivery_id}"},
    )
