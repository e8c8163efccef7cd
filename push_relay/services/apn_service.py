"""Apple Push Notification service client."""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Literal, Protocol

from aioapns import APNs, NotificationRequest

from push_relay.exceptions import CollaboratorUnreachableError, ConfigurationError
from push_relay.models.notification import DeliveryOutcome, OutboundNotification

logger = logging.getLogger(__name__)


class PushDeliveryClient(Protocol):
    """Anything that can deliver an OutboundNotification."""

    async def send(self, notification: OutboundNotification) -> DeliveryOutcome: ...


class APNService:
    """Delivers relay notifications through APNs with token-based auth."""

    def __init__(
        self,
        key_content: str,
        team_id: str,
        key_id: str,
        bundle_id: str,
        environment: Literal["production", "development"] = "development",
    ) -> None:
        """
        Initialize APNs service.

        Args:
            key_content: Apple P8 key content (not file path)
            team_id: Apple Team ID
            key_id: Apple Key ID
            bundle_id: Bundle ID of the receiving app (apns-topic)
            environment: APNs environment (production or development)

        Raises:
            ConfigurationError: If credentials are invalid
        """
        self.bundle_id = bundle_id
        self.environment = environment

        if not key_content or not key_content.strip():
            msg = "APNs key content is empty"
            logger.error(msg)
            raise ConfigurationError(msg, context={"key": "apns.private_key"})

        try:
            self.client = APNs(
                key=key_content,
                key_id=key_id,
                team_id=team_id,
                topic=bundle_id,  # Required for token-based auth
                use_sandbox=(environment == "development"),
            )
        except Exception as e:
            msg = f"Failed to initialize APNs client: {e}"
            logger.error(msg)
            raise ConfigurationError(msg, context={"team_id": team_id, "key_id": key_id}) from e

        logger.info(
            "APNs client initialized: team_id=%s, key_id=%s, env=%s",
            team_id,
            key_id,
            environment,
        )

    @staticmethod
    def _time_to_live(expiration: datetime | None, now: datetime | None = None) -> int | None:
        """Seconds left until expiration; aioapns turns this back into apns-expiration."""
        if expiration is None:
            return None
        now = now or datetime.now(timezone.utc)
        return max(0, math.ceil((expiration - now).total_seconds()))

    def build_request(self, notification: OutboundNotification) -> NotificationRequest:
        """Map an OutboundNotification onto an aioapns request."""
        return NotificationRequest(
            device_token=notification.device_token,
            message=notification.to_payload(),
            time_to_live=self._time_to_live(notification.expiration),
            priority=notification.priority.apns_value,
            collapse_key=notification.collapse_key,
        )

    async def send(self, notification: OutboundNotification) -> DeliveryOutcome:
        """
        Send one notification.

        Args:
            notification: Translated notification

        Returns:
            DeliveryOutcome with the APNs status, apns-id and reason

        Raises:
            CollaboratorUnreachableError: If APNs could not be reached
        """
        request = self.build_request(notification)

        try:
            result = await self.client.send_notification(request)
        except Exception as e:
            msg = f"Push error: {e}"
            logger.error(
                "Failed to reach APNs: token=...%s, error=%s",
                notification.device_token[-6:],
                e,
            )
            raise CollaboratorUnreachableError(
                msg,
                context={"cause": type(e).__name__},
            ) from e

        return DeliveryOutcome(
            accepted=result.is_successful,
            status_code=int(result.status),
            delivery_id=result.notification_id,
            reason_text=result.description,
        )
