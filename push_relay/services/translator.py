"""
Translation of Web Push requests into APNs notifications.

The encrypted body and the aesgcm key material are carried in the
notification's custom data fields:

    p  base-85 encoded body (always)
    x  route suffix below the device token, as literal text
    k  base-85 encoded Diffie-Hellman public key (Crypto-Key: dh=...)
    s  base-85 encoded salt (Encryption: salt=...)

The notification service extension on the device decrypts the payload.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from push_relay.exceptions import (
    MalformedPathError,
    MissingCryptoParameterError,
    UnsupportedEncodingError,
)
from push_relay.models.notification import (
    ContentEncoding,
    InboundPushRequest,
    OutboundNotification,
    Priority,
)
from push_relay.utils.base85 import encode85, encode_base64url_field
from push_relay.utils.header_params import require_value

logger = logging.getLogger(__name__)

DEFAULT_ALERT_TEXT = "\U0001f3ba"
DEFAULT_TOPIC = "dev.noppe.snowfox"


def _encoded_header_value(request: InboundPushRequest, header_name: str, key: str) -> str:
    value = require_value(request.headers, header_name, key)
    try:
        return encode_base64url_field(value)
    except ValueError as e:
        msg = f"Invalid base64url value {key} in header {header_name}: {e}"
        raise MissingCryptoParameterError(
            msg,
            context={"header": header_name, "key": key},
        ) from e


def _apply_aesgcm(request: InboundPushRequest, custom_fields: dict[str, str]) -> None:
    """Copy the aesgcm public key and salt into the k/s fields."""
    public_key = _encoded_header_value(request, "Crypto-Key", "dh")
    salt = _encoded_header_value(request, "Encryption", "salt")
    custom_fields["k"] = public_key
    custom_fields["s"] = salt


_ENCODING_HANDLERS: dict[
    ContentEncoding, Callable[[InboundPushRequest, dict[str, str]], None]
] = {
    ContentEncoding.AESGCM: _apply_aesgcm,
}


def parse_ttl(value: str) -> int | None:
    """TTL header in seconds, or None unless it is a non-negative decimal integer."""
    value = value.strip()
    if not value or not (value.isascii() and value.isdigit()):
        return None
    return int(value)


def translate(
    request: InboundPushRequest,
    *,
    now: datetime | None = None,
    alert_text: str = DEFAULT_ALERT_TEXT,
    topic: str = DEFAULT_TOPIC,
) -> OutboundNotification:
    """
    Build the APNs notification for a Web Push request.

    Args:
        request: Inbound Web Push request
        now: Reference time for TTL expiry (defaults to current UTC time)
        alert_text: Alert shown by the OS before the app rewrites it
        topic: Bundle identifier of the receiving app

    Returns:
        Fully populated OutboundNotification

    Raises:
        MalformedPathError: If the path carries no device token
        UnsupportedEncodingError: If Content-Encoding is not aesgcm
        MissingCryptoParameterError: If dh or salt is missing or not base64url
    """
    if not request.target_id:
        msg = "Invalid URL path: missing device token"
        raise MalformedPathError(msg, context={"route_suffix": request.route_suffix})

    custom_fields = {"p": encode85(request.body)}

    if request.route_suffix:
        custom_fields["x"] = request.route_suffix

    content_encoding = request.header("Content-Encoding")
    encoding = ContentEncoding.from_header(content_encoding)
    if encoding is ContentEncoding.UNSUPPORTED:
        # aes128gcm needs no extra headers, but the app cannot decrypt it yet
        msg = f"Unsupported Content-Encoding: {content_encoding}"
        raise UnsupportedEncodingError(msg, context={"content_encoding": content_encoding})
    _ENCODING_HANDLERS[encoding](request, custom_fields)

    expiration = None
    ttl = parse_ttl(request.header("TTL"))
    if ttl is not None:
        now = now or datetime.now(timezone.utc)
        expiration = now + timedelta(seconds=ttl)

    collapse_key = request.header("Topic") or None
    priority = Priority.from_urgency(request.header("Urgency"))

    logger.debug(
        "Translated Web Push request",
        extra={
            "body_bytes": len(request.body),
            "content_encoding": encoding.value,
            "ttl": ttl,
            "priority": priority.value,
        },
    )

    return OutboundNotification(
        device_token=request.target_id,
        topic=topic,
        alert_text=alert_text,
        custom_fields=custom_fields,
        collapse_key=collapse_key,
        expiration=expiration,
        priority=priority,
    )
