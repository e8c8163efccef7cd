"""
Base-85 encoding for notification custom data fields.

Uses the Z85 alphabet, but a trailing partial block of k bytes is not
zero-padded: it is read as a k-byte big-endian integer and written as
k + 1 digits. The mobile client's decoder expects exactly this layout.
"""

from __future__ import annotations

import base64

Z85_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ.-:+=^!/*?&<>()[]{}@%$#"


def _digits(value: int, count: int) -> list[str]:
    """Render value as `count` base-85 digits, most significant first."""
    digits = [""] * count
    for i in range(count - 1, -1, -1):
        value, remainder = divmod(value, 85)
        digits[i] = Z85_ALPHABET[remainder]
    return digits


def encoded_length(size: int) -> int:
    """Number of characters encode85 produces for `size` input bytes."""
    blocks, tail = divmod(size, 4)
    return blocks * 5 + (tail + 1 if tail else 0)


def encode85(data: bytes) -> str:
    """
    Encode bytes to the relay's base-85 text form.

    Args:
        data: Arbitrary bytes, possibly empty

    Returns:
        Printable string of encoded_length(len(data)) characters

    Example:
        >>> encode85(bytes.fromhex("864fd26fb559f75b"))
        'HelloWorld'
    """
    output: list[str] = []
    full = len(data) - len(data) % 4

    for offset in range(0, full, 4):
        value = int.from_bytes(data[offset : offset + 4], "big")
        output.extend(_digits(value, 5))

    tail = data[full:]
    if tail:
        output.extend(_digits(int.from_bytes(tail, "big"), len(tail) + 1))

    return "".join(output)


def decode_base64url(value: str) -> bytes:
    """
    Strictly decode a base64url string, with or without padding.

    Raises:
        ValueError: If the value contains characters outside the
            base64url alphabet or has an impossible length
    """
    stripped = value.rstrip("=")
    padded = stripped + "=" * (-len(stripped) % 4)
    return base64.b64decode(padded.encode("ascii"), altchars=b"-_", validate=True)


def encode_base64url_field(value: str) -> str:
    """Re-encode a base64url header value with encode85."""
    return encode85(decode_base64url(value))
