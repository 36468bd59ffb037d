"""Order model type definitions for database operations."""

from datetime import datetime
from enum import Enum
from typing import TypedDict
from uuid import UUID

from src.models.client import Client
from src.models.product import Product


class OrderStatus(str, Enum):
    """Order status values matching the database enum."""

    RECEIVED = "received"
    PREPARING = "preparing"
    READY = "ready"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class OrderLineItem(TypedDict):
    """Snapshot of a product taken when the order is created.

    Stored as part of the line_items JSONB array. Catalog price changes
    after creation never touch these values.
    """

    product_id: str
    name: str
    unit_price: float


class Order(TypedDict, total=False):
    """Order table row representation.

    The client and products keys are only present when the order was
    fetched with its associations.
    """

    id: UUID
    client_id: UUID
    product_ids: list[str]
    line_items: list[OrderLineItem]
    total_amount: float
    status: OrderStatus
    payment_reference: str | None
    created_at: datetime
    updated_at: datetime
    client: Client | None
    products: list[Product]


class OrderCreate(TypedDict):
    """Data required to insert a new order."""

    client_id: str
    product_ids: list[str]
    line_items: list[OrderLineItem]
    total_amount: float
    status: OrderStatus
    payment_reference: str | None


class OrderUpdate(TypedDict, total=False):
    """Columns written when an existing order changes.

    Updates only carry the columns that change so concurrent writers of
    other columns are not overwritten.
    """

    id: str
    status: OrderStatus
    payment_reference: str
