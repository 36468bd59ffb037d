"""Client lookups used when validating new orders."""

import logging
from uuid import UUID

from supabase import Client as SupabaseClient

from src.core.supabase import get_supabase_client
from src.models.client import Client

logger = logging.getLogger(__name__)


class ClientService:
    """Read-only access to the clients table."""

    def __init__(self, supabase_client: SupabaseClient | None = None):
        """Initialize client service.

        Args:
            supabase_client: Optional Supabase client for testing.
        """
        self._supabase_client = supabase_client

    @property
    def supabase(self) -> SupabaseClient:
        """Get Supabase client."""
        if self._supabase_client is None:
            self._supabase_client = get_supabase_client()
        return self._supabase_client

    async def get_client(self, client_id: UUID | str) -> Client | None:
        """Get a client by ID.

        Args:
            client_id: Client UUID.

        Returns:
            Client or None if not found.
        """
        response = (
            self.supabase.table("clients")
            .select("*")
            .eq("id", str(client_id))
            .maybe_single()
            .execute()
        )

        return response.data if response and response.data else None

    async def get_clients_by_ids(self, client_ids: list[str]) -> list[Client]:
        """Get every client whose id is in client_ids."""
        if not client_ids:
            return []

        response = (
            self.supabase.table("clients")
            .select("*")
            .in_("id", client_ids)
            .execute()
        )

        return response.data or []
