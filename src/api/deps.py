"""FastAPI dependencies for route handlers."""

from typing import Annotated

from fastapi import Depends

from src.services.order_service import OrderService


def get_order_service() -> OrderService:
    """Provide an order service wired to the shared clients.

    Override with app.dependency_overrides in tests.
    """
    return OrderService()


OrderServiceDep = Annotated[OrderService, Depends(get_order_service)]
