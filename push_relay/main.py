import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from push_relay.api import health, relay
from push_relay.api.errors import register_exception_handlers
from push_relay.config import get_settings
from push_relay.logging_config import configure_json_logging
from push_relay.middleware.relay_context import RelayContextMiddleware
from push_relay.services.apn_service import APNService
from push_relay.services.container import init_container
from push_relay.version import get_version

settings = get_settings()

configure_json_logging(log_level=settings.log_level, use_json=settings.log_json)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the APNs client once and share it across requests."""
    logger.info("Starting push relay %s...", get_version())

    settings.validate_apns_credentials()

    apn_service = APNService(
        key_content=settings.p8_private_key,
        team_id=settings.p8_team_id,
        key_id=settings.p8_key_id,
        bundle_id=settings.bundle_id,
        environment=settings.apns_mode,  # type: ignore[arg-type]
    )
    init_container(delivery_client=apn_service, settings=settings)

    logger.info(
        "Push relay ready (prefix=%s, topic=%s, env=%s)",
        settings.relay_prefix,
        settings.bundle_id,
        settings.apns_mode,
    )

    yield

    logger.info("Push relay shutting down")


def create_app() -> FastAPI:
    """Assemble the relay application."""
    application = FastAPI(
        title="Push Relay",
        description="Web Push to APNs relay",
        version=get_version(),
        lifespan=lifespan,
    )
    application.add_middleware(RelayContextMiddleware, relay_prefix=settings.relay_prefix)
    register_exception_handlers(application)

    application.include_router(health.router)
    application.include_router(relay.router, prefix=settings.relay_prefix)
    return application


app = create_app()


def run() -> None:
    """Console entry point: serve the relay with uvicorn."""
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_config=None,  # keep the JSON handlers configured above
    )
