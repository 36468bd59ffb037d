"""Order lifecycle business logic service."""

import logging
from collections.abc import Iterable
from typing import Any
from uuid import UUID

from src.api.middleware.error_handler import (
    ClientNotFoundError,
    InvalidStatusError,
    OrderNotFoundError,
    OrderPersistenceError,
    OrderQueryError,
    OrdersNotFoundError,
    OrderUpdateError,
    PaymentFailedError,
    ProductsNotFoundError,
)
from src.core.config import Settings, get_settings
from src.core.order_locks import OrderLockRegistry, get_order_locks
from src.models.order import Order, OrderCreate, OrderLineItem, OrderStatus, OrderUpdate
from src.services.client_service import ClientService
from src.services.order_repository import OrderRepository
from src.services.order_state import KITCHEN_QUEUE_STATUSES, check_transition, parse_status
from src.services.payment_gateway import PaymentGatewayClient
from src.services.product_service import ProductService
from src.services.production_notifier import ProductionNotifier

logger = logging.getLogger(__name__)


class OrderService:
    """Creates orders, takes payment for them and moves them through the kitchen.

    Order creation is not transactional across the database and the payment
    service: the order row is written first and stays in the received status
    without a payment reference when the payment call fails.
    """

    def __init__(
        self,
        order_repository: OrderRepository | None = None,
        client_service: ClientService | None = None,
        product_service: ProductService | None = None,
        payment_gateway: PaymentGatewayClient | None = None,
        production_notifier: ProductionNotifier | None = None,
        order_locks: OrderLockRegistry | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize order service.

        Every collaborator is optional so tests can pass doubles; defaults
        use the shared Supabase and HTTP clients.
        """
        self.client_service = client_service or ClientService()
        self.product_service = product_service or ProductService()
        self.orders = order_repository or OrderRepository(
            client_service=self.client_service,
            product_service=self.product_service,
        )
        self.payment_gateway = payment_gateway or PaymentGatewayClient()
        self.production_notifier = production_notifier or ProductionNotifier()
        self.locks = order_locks or get_order_locks()
        self.settings = settings or get_settings()

    async def create_order(
        self,
        client_id: UUID | str,
        product_ids: Iterable[UUID | str],
        total_amount: float,
    ) -> dict[str, Any]:
        """Create an order and request its payment.

        Args:
            client_id: Client placing the order.
            product_ids: Products in the order. Duplicates are collapsed.
            total_amount: Amount to charge, as supplied by the caller.

        Returns:
            dict: Contains order_id and payment_reference.

        Raises:
            ClientNotFoundError: If the client does not exist.
            ProductsNotFoundError: If any product does not exist.
            OrderPersistenceError: If the order could not be stored.
            PaymentFailedError: If the payment service failed. The order
                row is kept.
        """
        requested = list(dict.fromkeys(str(product_id) for product_id in product_ids))
        logger.debug("Creating order for clientId: %s with products: %s", client_id, requested)

        client = await self.client_service.get_client(client_id)
        if not client:
            logger.error("Client not found: %s", client_id)
            raise ClientNotFoundError(str(client_id))

        products = await self.product_service.get_products_by_ids(requested)
        by_id = {str(product["id"]): product for product in products}
        missing = [product_id for product_id in requested if product_id not in by_id]
        if not requested or missing or len(products) != len(requested):
            logger.error("Products not found or mismatch: %s", requested)
            raise ProductsNotFoundError(missing)

        line_items: list[OrderLineItem] = [
            {
                "product_id": product_id,
                "name": by_id[product_id]["name"],
                "unit_price": float(by_id[product_id]["price"]),
            }
            for product_id in requested
        ]

        new_order: OrderCreate = {
            "client_id": str(client_id),
            "product_ids": requested,
            "line_items": line_items,
            "total_amount": total_amount,
            "status": OrderStatus.RECEIVED,
            "payment_reference": None,
        }
        try:
            saved = await self.orders.save(new_order)
        except Exception as e:
            logger.error("Failed to create order: %s", e)
            raise OrderPersistenceError() from e

        order_id = str(saved["id"])
        logger.debug("Order created successfully: %s", order_id)

        try:
            payment_reference = await self.payment_gateway.request_payment(
                order_id=order_id,
                amount=total_amount,
                client_id=str(client_id),
                line_items=line_items,
            )
        except PaymentFailedError:
            logger.error("Order %s kept as %s without payment", order_id, OrderStatus.RECEIVED.value)
            raise

        reference_update: OrderUpdate = {"id": order_id, "payment_reference": payment_reference}
        try:
            await self.orders.save(reference_update)
        except Exception as e:
            # The payment was accepted, so the caller still gets the reference
            logger.error("Failed to record payment reference for order %s: %s", order_id, e)

        return {"order_id": order_id, "payment_reference": payment_reference}

    async def update_order_status(self, order_id: UUID | str, status: str) -> Order:
        """Move an order to a new status.

        Entering preparing also notifies the production service. That
        notification is best effort and never fails the update.

        Args:
            order_id: The order's UUID.
            status: Target status value.

        Returns:
            Order: The updated order with its associations.

        Raises:
            OrderNotFoundError: If the order does not exist.
            InvalidStatusError: If status is not an order status.
            InvalidTransitionError: If strict transitions forbid the move.
            OrderUpdateError: If the new status could not be stored.
        """
        order_id = str(order_id)
        logger.debug("Starting update for order ID: %s with status: %s", order_id, status)

        async with self.locks.hold(order_id):
            order = await self._fetch_order(order_id)

            try:
                new_status = parse_status(status)
            except InvalidStatusError:
                logger.error("Invalid status provided: %s", status)
                raise

            check_transition(
                OrderStatus(order["status"]),
                new_status,
                strict=self.settings.strict_status_transitions,
            )

            status_update: OrderUpdate = {"id": order_id, "status": new_status}
            try:
                saved = await self.orders.save(status_update)
            except Exception as e:
                logger.error("Failed to update order status: %s", e)
                raise OrderUpdateError() from e

        updated: Order = {**saved, "client": order.get("client"), "products": order.get("products", [])}
        logger.debug("Order %s updated to %s", order_id, new_status.value)

        if new_status is OrderStatus.PREPARING:
            try:
                await self.production_notifier.notify_preparing(order_id)
            except Exception as e:
                logger.error("Failed to notify production service: %s", e)

        return updated

    async def list_orders(self, status: str | None = None) -> list[Order]:
        """List orders oldest first.

        Args:
            status: Only return orders in this status. Defaults to the
                kitchen queue (received, preparing and ready).

        Returns:
            list[Order]: Matching orders with associations.

        Raises:
            InvalidStatusError: If status is not an order status.
            OrdersNotFoundError: If no order matched.
            OrderQueryError: If the store failed.
        """
        logger.debug("Fetching orders with status: %s", status or "kitchen queue")

        if status is None:
            statuses = list(KITCHEN_QUEUE_STATUSES)
        else:
            try:
                statuses = [parse_status(status)]
            except InvalidStatusError:
                logger.error("Invalid status provided: %s", status)
                raise

        try:
            orders = await self.orders.find_by_status_in(statuses)
        except Exception as e:
            logger.error("Failed to fetch orders: %s", e)
            raise OrderQueryError() from e

        if not orders:
            logger.error("No orders found in %s", [s.value for s in statuses])
            raise OrdersNotFoundError([s.value for s in statuses])

        return orders

    async def get_order(self, order_id: UUID | str) -> Order:
        """Get an order with its associations.

        Raises:
            OrderNotFoundError: If the order does not exist.
            OrderQueryError: If the store failed.
        """
        return await self._fetch_order(str(order_id))

    async def _fetch_order(self, order_id: str) -> Order:
        try:
            order = await self.orders.find_by_id(order_id, with_associations=True)
        except Exception as e:
            logger.error("Failed to fetch order %s: %s", order_id, e)
            raise OrderQueryError("Failed to fetch order") from e

        if order is None:
            logger.error("Order with ID %s not found", order_id)
            raise OrderNotFoundError(order_id)
        return order
