"""Product lookups used when validating and displaying orders."""

import logging

from supabase import Client

from src.core.supabase import get_supabase_client
from src.models.product import Product

logger = logging.getLogger(__name__)


class ProductService:
    """Read-only access to the products table."""

    def __init__(self, supabase_client: Client | None = None):
        """Initialize product service.

        Args:
            supabase_client: Optional Supabase client for testing.
        """
        self._supabase_client = supabase_client

    @property
    def supabase(self) -> Client:
        """Get Supabase client."""
        if self._supabase_client is None:
            self._supabase_client = get_supabase_client()
        return self._supabase_client

    async def get_products_by_ids(self, product_ids: list[str]) -> list[Product]:
        """Get the products whose ids are in product_ids.

        The result only contains the products that exist, so it may be
        shorter than the request. Callers compare the two to detect
        missing products.

        Args:
            product_ids: Product UUIDs to look up.

        Returns:
            list[Product]: Products found, in no particular order.
        """
        if not product_ids:
            return []

        response = (
            self.supabase.table("products")
            .select("*")
            .in_("id", [str(product_id) for product_id in product_ids])
            .execute()
        )

        products = response.data or []
        logger.debug("Resolved %d of %d products", len(products), len(product_ids))
        return products
