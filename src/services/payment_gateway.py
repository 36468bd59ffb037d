"""Client for the external payment service."""

import logging
import time
from typing import Any

import httpx

from src.api.middleware.error_handler import PaymentFailedError
from src.core.config import get_settings
from src.core.http import get_http_client
from src.models.order import OrderLineItem

logger = logging.getLogger(__name__)

# Latency threshold for logging (milliseconds)
SLOW_CALL_THRESHOLD_MS = 2000


class PaymentGatewayClient:
    """Requests payments for orders and returns the payment QR code.

    A single attempt is made per order. Transport errors, timeouts,
    non-2xx responses and bodies without a qrCode all surface as
    PaymentFailedError.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        base_url: str | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        """Initialize payment gateway client.

        Args:
            http_client: Optional HTTP client for testing.
            base_url: Payment service base URL. Defaults to settings.
            timeout_seconds: Request timeout. Defaults to settings.
        """
        settings = get_settings()
        self._http_client = http_client
        self.base_url = (base_url or settings.payment_service_url).rstrip("/")
        self.timeout_seconds = timeout_seconds or settings.payment_timeout_seconds

    @property
    def http(self) -> httpx.AsyncClient:
        """Get HTTP client."""
        if self._http_client is None:
            self._http_client = get_http_client()
        return self._http_client

    async def request_payment(
        self,
        order_id: str,
        amount: float,
        client_id: str,
        line_items: list[OrderLineItem],
    ) -> str:
        """Request a payment for an order.

        Args:
            order_id: The order's UUID.
            amount: Amount to charge.
            client_id: The paying client's UUID.
            line_items: Line item snapshots sent as the payment's products.

        Returns:
            str: The payment QR code.

        Raises:
            PaymentFailedError: If the call fails or no QR code is returned.
        """
        body: dict[str, Any] = {
            "orderId": str(order_id),
            "amount": amount,
            "clientId": str(client_id),
            "products": [
                {
                    "id": item["product_id"],
                    "name": item["name"],
                    "unitPrice": item["unit_price"],
                }
                for item in line_items
            ],
        }

        start_time = time.perf_counter()
        try:
            response = await self.http.post(
                f"{self.base_url}/payments",
                json=body,
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            logger.error("Payment API call timed out for order %s: %s", order_id, e)
            raise PaymentFailedError() from e
        except httpx.HTTPError as e:
            logger.error("Payment API call failed for order %s: %s", order_id, e)
            raise PaymentFailedError() from e
        except ValueError as e:
            logger.error("Payment API returned invalid JSON for order %s: %s", order_id, e)
            raise PaymentFailedError() from e
        finally:
            latency_ms = (time.perf_counter() - start_time) * 1000
            if latency_ms > SLOW_CALL_THRESHOLD_MS:
                logger.warning("SLOW PAYMENT CALL: order %s took %.2fms", order_id, latency_ms)

        qr_code = data.get("qrCode") if isinstance(data, dict) else None
        if not isinstance(qr_code, str) or not qr_code:
            logger.error("QR Code not generated for order %s: %s", order_id, data)
            raise PaymentFailedError("QR Code generation failed")

        return qr_code
