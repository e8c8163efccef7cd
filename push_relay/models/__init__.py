"""Models for the push relay."""

from push_relay.models.notification import (
    ContentEncoding,
    DeliveryOutcome,
    InboundPushRequest,
    OutboundNotification,
    Priority,
    RelayResponse,
)

__all__ = [
    "ContentEncoding",
    "DeliveryOutcome",
    "InboundPushRequest",
    "OutboundNotification",
    "Priority",
    "RelayResponse",
]
