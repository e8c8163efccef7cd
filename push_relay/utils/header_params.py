"""Parsing of `key=value;key=value` header parameters (Crypto-Key, Encryption)."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from push_relay.exceptions import MissingCryptoParameterError

logger = logging.getLogger(__name__)


def parse_key_values(value: str) -> dict[str, str]:
    """
    Split a compound header value into its named sub-fields.

    Fields are separated by `;`; empty fields are skipped. Each field is
    split on its first `=`, so values may themselves contain `=`.
    A field without any `=` is dropped.

    Args:
        value: Raw header value, e.g. "dh=BNc...;p256ecdsa=BDd..."

    Returns:
        Mapping of sub-field name to raw value

    Example:
        >>> parse_key_values("dh=AAA;salt=BBB")
        {'dh': 'AAA', 'salt': 'BBB'}
    """
    params: dict[str, str] = {}

    for field in value.split(";"):
        field = field.strip()
        if not field:
            continue

        key, sep, rest = field.partition("=")
        if not sep:
            logger.debug("Dropping header field without '='", extra={"field": field})
            continue

        params[key.strip()] = rest.strip()

    return params


def require_value(headers: Mapping[str, str], header_name: str, key: str) -> str:
    """
    Look up one sub-field of a compound header.

    Raises:
        MissingCryptoParameterError: If the header or the sub-field is absent
    """
    params = parse_key_values(headers.get(header_name, ""))
    try:
        return params[key]
    except KeyError:
        msg = f"Value {key} not found in header {header_name}"
        raise MissingCryptoParameterError(
            msg,
            context={"header": header_name, "key": key},
        ) from None
