"""
Service dependency container.

Holds the delivery client built in the application lifespan so routes
receive it through FastAPI's Depends() instead of a module-level global.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from push_relay.config import Settings
    from push_relay.services.apn_service import PushDeliveryClient


class ServiceContainer:
    """Container for the relay's long-lived services."""

    def __init__(self, delivery_client: PushDeliveryClient, settings: Settings) -> None:
        self.delivery_client = delivery_client
        self.settings = settings


_container: ServiceContainer | None = None


def init_container(delivery_client: PushDeliveryClient, settings: Settings) -> None:
    """Initialize service container (called once in FastAPI lifespan).

    Args:
        delivery_client: Client that delivers notifications (APNService in production)
        settings: Loaded relay settings
    """
    global _container
    _container = ServiceContainer(delivery_client=delivery_client, settings=settings)


def get_container() -> ServiceContainer:
    """Get service container (use via FastAPI Depends).

    Raises:
        RuntimeError: If container not initialized (lifespan not running)
    """
    if _container is None:
        msg = "Service container not initialized - application lifespan may not be running"
        raise RuntimeError(msg)
    return _container


def reset_container_for_testing() -> None:
    global _container
    _container = None
