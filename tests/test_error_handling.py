"""Tests for relay exceptions and their HTTP mapping."""

from __future__ import annotations

import logging

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from push_relay.api.errors import register_exception_handlers
from push_relay.exceptions import (
    CollaboratorRejectedError,
    CollaboratorUnreachableError,
    ConfigurationError,
    MalformedPathError,
    MissingCryptoParameterError,
    RelayError,
    UnsupportedEncodingError,
)


class TestCustomExceptions:
    """Test custom exception classes."""

    def test_base_error_context(self) -> None:
        error = RelayError("Test error", context={"operation": "test"})

        assert str(error) == "Test error"
        assert error.context == {"operation": "test"}
        assert error.status_code == 500

    def test_base_error_without_context(self) -> None:
        assert RelayError("Test error").context == {}

    @pytest.mark.parametrize(
        ("error_class", "status_code"),
        [
            (MalformedPathError, 500),
            (UnsupportedEncodingError, 415),
            (MissingCryptoParameterError, 500),
            (CollaboratorUnreachableError, 500),
            (ConfigurationError, 500),
        ],
    )
    def test_status_codes(self, error_class: type[RelayError], status_code: int) -> None:
        error = error_class("boom")

        assert error.status_code == status_code
        assert isinstance(error, RelayError)

    def test_rejected_carries_collaborator_status(self) -> None:
        error = CollaboratorRejectedError("Unregistered", status_code=410)

        assert error.status_code == 410
        assert str(error) == "Unregistered"


@pytest.fixture
def error_client():
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/unsupported")
    async def unsupported() -> None:
        raise UnsupportedEncodingError("Unsupported Content-Encoding: aes128gcm")

    @app.get("/unreachable")
    async def unreachable() -> None:
        raise CollaboratorUnreachableError("Push error: timeout", context={"cause": "TimeoutError"})

    with TestClient(app) as c:
        yield c


def test_handler_renders_plain_text(error_client) -> None:
    response = error_client.get("/unsupported")

    assert response.status_code == 415
    assert response.text == "Unsupported Content-Encoding: aes128gcm\n"
    assert response.headers["content-type"].startswith("text/plain")


def test_handler_logs_client_errors_as_warning(error_client, caplog) -> None:
    with caplog.at_level(logging.INFO, logger="push_relay.api.errors"):
        error_client.get("/unsupported")

    record = [r for r in caplog.records if r.name == "push_relay.api.errors"][-1]
    assert record.levelno == logging.WARNING
    assert record.error_type == "UnsupportedEncodingError"


def test_handler_logs_server_errors_as_error(error_client, caplog) -> None:
    with caplog.at_level(logging.INFO, logger="push_relay.api.errors"):
        response = error_client.get("/unreachable")

    assert response.status_code == 500
    record = [r for r in caplog.records if r.name == "push_relay.api.errors"][-1]
    assert record.levelno == logging.ERROR
    assert record.error_type == "CollaboratorUnreachableError"
    assert record.cause == "TimeoutError"
