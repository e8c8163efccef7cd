"""Tests for application assembly and lifespan wiring."""

from __future__ import annotations

import logging
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from push_relay.exceptions import ConfigurationError
from push_relay.models.notification import DeliveryOutcome


@pytest.fixture
def main_module(monkeypatch, relay_settings):
    """Import push_relay.main without leaving its JSON handler on the root logger."""
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level

    from push_relay import main

    monkeypatch.setattr(main, "settings", relay_settings)
    yield main

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(level)


@pytest.fixture
def mock_apn_service():
    service = MagicMock()
    service.send = AsyncMock(
        return_value=DeliveryOutcome(accepted=True, status_code=200, delivery_id="apns-id-9")
    )
    return service


def test_lifespan_builds_apn_service(main_module, mock_apn_service, relay_settings, aesgcm_headers) -> None:
    with patch.object(main_module, "APNService", return_value=mock_apn_service) as apn_class:
        with TestClient(main_module.create_app()) as client:
            ping = client.get("/ping")
            response = client.post("/relay-to/abc123", content=b"\x00", headers=aesgcm_headers)

        _args, kwargs = apn_class.call_args
        assert kwargs["key_content"] == relay_settings.p8_private_key
        assert kwargs["bundle_id"] == "dev.noppe.snowfox"
        assert kwargs["environment"] == "development"

    assert ping.text == "pong"
    assert response.status_code == 201
    assert response.headers["Location"] == "https://not-supported/apns-id-9"


def test_custom_prefix(main_module, mock_apn_service, relay_settings, aesgcm_headers, monkeypatch) -> None:
    monkeypatch.setattr(main_module, "settings", relay_settings.model_copy(update={"relay_prefix": "/push"}))

    with patch.object(main_module, "APNService", return_value=mock_apn_service):
        with TestClient(main_module.create_app()) as client:
            response = client.post("/push/abc123", content=b"", headers=aesgcm_headers)

    assert response.status_code == 201


def test_lifespan_requires_credentials(main_module, monkeypatch) -> None:
    from push_relay.config import Settings

    monkeypatch.setattr(main_module, "settings", Settings())

    with patch.object(main_module, "APNService") as apn_class, pytest.raises(ConfigurationError):
        with TestClient(main_module.create_app()):
            pass

    apn_class.assert_not_called()
