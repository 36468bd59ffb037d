"""Product model type definitions for database operations."""

from datetime import datetime
from enum import Enum
from typing import TypedDict
from uuid import UUID


class ProductCategory(str, Enum):
    """Product category values."""

    LANCHES = "Lanches"
    ACOMPANHAMENTO = "Acompanhamento"
    BEBIDA = "Bebida"
    SOBREMESA = "Sobremesa"


class Product(TypedDict):
    """Product table row representation.

    Represents a product stored in the products table.
    """

    id: UUID
    name: str
    description: str
    price: float
    category: str
    image_url: str | None
    created_at: datetime
    updated_at: datetime
