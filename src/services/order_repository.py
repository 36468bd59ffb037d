"""Order persistence on top of the Supabase orders table."""

import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from supabase import Client

from src.core.supabase import get_supabase_client
from src.models.order import Order, OrderStatus
from src.services.client_service import ClientService
from src.services.product_service import ProductService

logger = logging.getLogger(__name__)

# Keys that are derived on read and never written back
_ASSOCIATION_KEYS = ("client", "products")
_STORE_MANAGED_KEYS = ("id", "created_at", "updated_at")


class OrderRepository:
    """Durable storage for orders.

    Mutations go through save(), which inserts rows without an id and
    updates rows that have one. Every call maps to a single-row statement;
    nothing here spans multiple rows or tables in a transaction.
    """

    def __init__(
        self,
        supabase_client: Client | None = None,
        client_service: ClientService | None = None,
        product_service: ProductService | None = None,
    ):
        """Initialize order repository.

        Args:
            supabase_client: Optional Supabase client for testing.
            client_service: Optional client lookups for associations.
            product_service: Optional product lookups for associations.
        """
        self._supabase_client = supabase_client
        self.client_service = client_service or ClientService(supabase_client)
        self.product_service = product_service or ProductService(supabase_client)

    @property
    def supabase(self) -> Client:
        """Get Supabase client."""
        if self._supabase_client is None:
            self._supabase_client = get_supabase_client()
        return self._supabase_client

    async def save(self, order: dict[str, Any]) -> Order:
        """Insert or update an order.

        Args:
            order: Order data. Rows with an "id" are updated with only the
                columns present, others inserted.

        Returns:
            Order: The stored row, carrying over any associations present
            on the input.

        Raises:
            RuntimeError: If the store returned no row.
        """
        payload = self._to_row(order)
        order_id = order.get("id")

        if order_id:
            payload["updated_at"] = datetime.now(timezone.utc).isoformat()
            response = (
                self.supabase.table("orders")
                .update(payload)
                .eq("id", str(order_id))
                .execute()
            )
        else:
            response = self.supabase.table("orders").insert(payload).execute()

        if not response.data:
            raise RuntimeError(f"Order save returned no rows (id={order_id})")

        saved: Order = response.data[0]
        for key in _ASSOCIATION_KEYS:
            if key in order:
                saved[key] = order[key]
        return saved

    async def find_by_id(
        self,
        order_id: UUID | str,
        with_associations: bool = False,
    ) -> Order | None:
        """Get an order by ID.

        Args:
            order_id: The order's UUID.
            with_associations: Also load the client and current products.

        Returns:
            Order | None: The order or None if not found.
        """
        response = (
            self.supabase.table("orders")
            .select("*")
            .eq("id", str(order_id))
            .maybe_single()
            .execute()
        )

        order = response.data if response and response.data else None
        if order is None:
            return None

        if with_associations:
            await self._attach_associations([order])
        return order

    async def find_by_status_in(self, statuses: Iterable[OrderStatus | str]) -> list[Order]:
        """Get orders in any of the given statuses, oldest first.

        Args:
            statuses: Statuses to match.

        Returns:
            list[Order]: Matching orders with associations, ordered by
            created_at ascending.
        """
        values = [_status_value(status) for status in statuses]
        response = (
            self.supabase.table("orders")
            .select("*")
            .in_("status", values)
            .order("created_at", desc=False)
            .execute()
        )

        orders = response.data or []
        if orders:
            await self._attach_associations(orders)
        return orders

    async def _attach_associations(self, orders: list[Order]) -> None:
        """Load clients and current products for a batch of orders in place."""
        client_ids = sorted({str(order["client_id"]) for order in orders if order.get("client_id")})
        product_ids = sorted({str(pid) for order in orders for pid in order.get("product_ids") or []})

        clients = {str(c["id"]): c for c in await self.client_service.get_clients_by_ids(client_ids)}
        products = {str(p["id"]): p for p in await self.product_service.get_products_by_ids(product_ids)}

        for order in orders:
            client = clients.get(str(order.get("client_id")))
            if client is None:
                # Client deletion does not cascade to orders
                logger.warning("Order %s has no associated client", order.get("id"))
            order["client"] = client
            order["products"] = [
                products[str(pid)] for pid in order.get("product_ids") or [] if str(pid) in products
            ]

    @staticmethod
    def _to_row(order: dict[str, Any]) -> dict[str, Any]:
        """Build the column payload for an insert or update."""
        row = {
            key: value
            for key, value in order.items()
            if key not in _ASSOCIATION_KEYS and key not in _STORE_MANAGED_KEYS
        }
        if "status" in row:
            row["status"] = _status_value(row["status"])
        if "client_id" in row:
            row["client_id"] = str(row["client_id"])
        if "product_ids" in row:
            row["product_ids"] = [str(pid) for pid in row["product_ids"]]
        return row


def _status_value(status: OrderStatus | str) -> str:
    return status.value if isinstance(status, OrderStatus) else str(status)
