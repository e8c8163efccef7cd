from __future__ import annotations

from typing import TYPE_CHECKING

from push_relay.services.container import get_container

if TYPE_CHECKING:
    from push_relay.config import Settings
    from push_relay.services.apn_service import PushDeliveryClient


async def get_delivery_client() -> PushDeliveryClient:
    """Get the push delivery client via dependency injection."""
    container = get_container()
    return container.delivery_client


async def get_relay_settings() -> Settings:
    """Get the settings the container was built with."""
    container = get_container()
    return container.settings
