"""Notifications to the kitchen production service."""

import logging

import httpx

from src.core.config import get_settings
from src.core.http import get_http_client

logger = logging.getLogger(__name__)


class ProductionNotifier:
    """Tells the production service that an order entered preparation.

    Best effort: one attempt, bounded by a timeout, and failures are
    logged instead of raised.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        base_url: str | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        settings = get_settings()
        self._http_client = http_client
        self.base_url = (base_url if base_url is not None else settings.production_service_url).rstrip("/")
        self.timeout_seconds = timeout_seconds or settings.production_timeout_seconds

    @property
    def http(self) -> httpx.AsyncClient:
        """Get HTTP client."""
        if self._http_client is None:
            self._http_client = get_http_client()
        return self._http_client

    async def notify_preparing(self, order_id: str) -> bool:
        """Send an order to the production queue.

        Args:
            order_id: The order's UUID.

        Returns:
            bool: True if the production service accepted the notification.
        """
        if not self.base_url:
            logger.warning("Production service URL not configured; order %s not sent", order_id)
            return False

        logger.debug("Notifying production service for order: %s", order_id)
        try:
            response = await self.http.post(
                f"{self.base_url}/production",
                json={"orderId": str(order_id)},
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("Failed to notify production service for order %s: %s", order_id, e)
            return False

        logger.info("Order %s sent to production queue (status %s)", order_id, response.status_code)
        return True
