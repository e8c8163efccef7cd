"""
Custom exception classes with context for the push relay.

All exceptions inherit from RelayError and carry the HTTP status the
relay answers with, plus optional context for structured logging.
"""

from __future__ import annotations


class RelayError(Exception):
    """
    Base exception for the push relay.

    Attributes:
        message: Human-readable error message (also the response body)
        context: Optional dictionary with additional context for logging
        status_code: HTTP status returned to the Web Push sender
    """

    status_code: int = 500

    def __init__(self, message: str, context: dict[str, object] | None = None):
        """
        Initialize exception with message and optional context.

        Args:
            message: Human-readable error message
            context: Optional dictionary with contextual information
        """
        super().__init__(message)
        self.context = context or {}


class MalformedPathError(RelayError):
    """
    Relay path does not contain a device token.

    Example:
        raise MalformedPathError(
            "Invalid URL path: /relay-to/",
            context={"path": "/relay-to/"},
        )
    """


class UnsupportedEncodingError(RelayError):
    """
    Content-Encoding is not one the mobile client can decrypt.

    aes128gcm is deliberately rejected here until the client ships a decoder.
    """

    status_code = 415


class MissingCryptoParameterError(RelayError):
    """
    Crypto-Key or Encryption header lacks a required, decodable sub-field.

    Example:
        raise MissingCryptoParameterError(
            "Value salt not found in header Encryption",
            context={"header": "Encryption", "key": "salt"},
        )
    """


class CollaboratorRejectedError(RelayError):
    """APNs answered but refused the notification."""

    def __init__(
        self,
        message: str,
        status_code: int,
        context: dict[str, object] | None = None,
    ):
        super().__init__(message, context)
        self.status_code = status_code


class CollaboratorUnreachableError(RelayError):
    """Talking to APNs failed before a response came back."""


class ConfigurationError(RelayError):
    """
    Configuration error.

    Raised at startup when credentials or settings are missing or invalid.

    Example:
        raise ConfigurationError(
            "APNs key content is empty",
            context={"key": "apns.private_key"},
        )
    """
