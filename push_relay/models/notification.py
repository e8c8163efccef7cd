"""Inbound Web Push request and outbound APNs notification models."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field
from starlette.datastructures import Headers


class Priority(str, Enum):
    """APNs delivery priority."""

    LOW = "low"
    HIGH = "high"

    @property
    def apns_value(self) -> int:
        """Numeric apns-priority header value."""
        return 5 if self is Priority.LOW else 10

    @classmethod
    def from_urgency(cls, urgency: str | None) -> Priority:
        """Map a Web Push Urgency header onto APNs priority."""
        if urgency in ("very-low", "low"):
            return cls.LOW
        return cls.HIGH


class ContentEncoding(str, Enum):
    """Web Push content encodings, as far as the relay knows them."""

    AESGCM = "aesgcm"
    UNSUPPORTED = "unsupported"

    @classmethod
    def from_header(cls, value: str | None) -> ContentEncoding:
        if value == cls.AESGCM.value:
            return cls.AESGCM
        return cls.UNSUPPORTED


@dataclass
class InboundPushRequest:
    """A Web Push delivery request as received on the relay route."""

    target_id: str
    body: bytes = b""
    route_suffix: str = ""
    headers: Headers = field(default_factory=lambda: Headers(headers={}))

    @classmethod
    def from_path(
        cls,
        path: str,
        body: bytes = b"",
        headers: Mapping[str, str] | None = None,
    ) -> InboundPushRequest:
        """
        Build a request from the route path below the relay prefix.

        Args:
            path: Path after the prefix, e.g. "abc123/foo/bar"
            body: Encrypted Web Push payload
            headers: Request headers (looked up case-insensitively)

        Returns:
            InboundPushRequest with target_id "abc123" and route_suffix "foo/bar"
        """
        target_id, _, route_suffix = path.partition("/")
        if not isinstance(headers, Headers):
            headers = Headers(headers=dict(headers or {}))
        return cls(
            target_id=target_id,
            body=body,
            route_suffix=route_suffix,
            headers=headers,
        )

    def header(self, name: str) -> str:
        """Header value, or "" when absent."""
        return self.headers.get(name, "")


class OutboundNotification(BaseModel):
    """APNs notification built from a Web Push request."""

    device_token: str = Field(..., description="APNs device token (relay target)")
    topic: str = Field(..., description="Bundle identifier of the receiving app")
    alert_text: str = Field(..., description="Generic alert shown before the app decrypts")
    mutable_content: bool = Field(True, description="Let the notification service extension rewrite it")
    content_available: bool = Field(True, description="Wake the app for background processing")
    custom_fields: dict[str, str] = Field(default_factory=dict, description="p/x/k/s data fields")
    collapse_key: str | None = Field(None, description="apns-collapse-id from the Topic header")
    expiration: datetime | None = Field(None, description="Absolute expiry derived from TTL")
    priority: Priority = Field(Priority.HIGH, description="Delivery priority")

    def to_payload(self) -> dict[str, Any]:
        """Render the APNs JSON payload (custom fields at the top level)."""
        aps: dict[str, Any] = {"alert": self.alert_text}
        if self.mutable_content:
            aps["mutable-content"] = 1
        if self.content_available:
            aps["content-available"] = 1

        payload: dict[str, Any] = {"aps": aps}
        payload.update(self.custom_fields)
        return payload


class DeliveryOutcome(BaseModel):
    """Result of handing a notification to APNs."""

    accepted: bool
    status_code: int
    delivery_id: str | None = None
    reason_text: str | None = None


@dataclass
class RelayResponse:
    """HTTP response shape returned to the Web Push sender."""

    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""
