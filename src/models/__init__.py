"""Database model type definitions."""

from src.models.client import Client
from src.models.order import Order, OrderCreate, OrderLineItem, OrderStatus, OrderUpdate
from src.models.product import Product, ProductCategory

__all__ = [
    "Client",
    "Order",
    "OrderCreate",
    "OrderLineItem",
    "OrderStatus",
    "OrderUpdate",
    "Product",
    "ProductCategory",
]
