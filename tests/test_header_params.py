"""Tests for Crypto-Key / Encryption header parsing."""

from __future__ import annotations

import pytest

from push_relay.exceptions import MissingCryptoParameterError, RelayError
from push_relay.utils.header_params import parse_key_values, require_value


def test_parse_two_fields() -> None:
    assert parse_key_values("dh=AAA;salt=BBB") == {"dh": "AAA", "salt": "BBB"}


def test_parse_empty_value() -> None:
    assert parse_key_values("") == {}


def test_parse_skips_empty_fields() -> None:
    assert parse_key_values(";;dh=AAA;;salt=BBB;") == {"dh": "AAA", "salt": "BBB"}


def test_parse_splits_on_first_equals_only() -> None:
    assert parse_key_values("dh=AA==;salt=a=b") == {"dh": "AA==", "salt": "a=b"}


def test_parse_strips_whitespace_around_fields() -> None:
    assert parse_key_values("keyid=p256dh; dh=BBB") == {"keyid": "p256dh", "dh": "BBB"}


def test_parse_drops_field_without_equals() -> None:
    assert parse_key_values("garbage;dh=AAA") == {"dh": "AAA"}


def test_parse_allows_empty_value() -> None:
    assert parse_key_values("dh=") == {"dh": ""}


class TestRequireValue:
    """Tests for required sub-field lookup."""

    def test_returns_value(self) -> None:
        headers = {"Crypto-Key": "dh=AAA;p256ecdsa=BBB"}
        assert require_value(headers, "Crypto-Key", "dh") == "AAA"

    def test_missing_key_names_header_and_key(self) -> None:
        headers = {"Encryption": "rs=4096"}

        with pytest.raises(MissingCryptoParameterError) as exc_info:
            require_value(headers, "Encryption", "salt")

        assert str(exc_info.value) == "Value salt not found in header Encryption"
        assert exc_info.value.context == {"header": "Encryption", "key": "salt"}
        assert exc_info.value.status_code == 500
        assert isinstance(exc_info.value, RelayError)

    def test_missing_header(self) -> None:
        with pytest.raises(MissingCryptoParameterError, match="Value dh not found in header Crypto-Key"):
            require_value({}, "Crypto-Key", "dh")

    def test_dropped_field_counts_as_missing(self) -> None:
        with pytest.raises(MissingCryptoParameterError):
            require_value({"Crypto-Key": "dh"}, "Crypto-Key", "dh")
