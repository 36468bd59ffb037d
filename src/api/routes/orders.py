"""Order API routes."""

import logging
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.api.deps import OrderServiceDep
from src.schemas.order import (
    OrderCreate,
    OrderCreateResponse,
    OrderListResponse,
    OrderResponse,
    OrderStatusUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["orders"])

_ERROR_RESPONSES = {
    400: {"description": "Invalid status"},
    404: {"description": "Client, product or order not found"},
}


@router.post(
    "",
    response_model=OrderCreateResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**_ERROR_RESPONSES, 502: {"description": "Payment service failed"}},
    summary="Create a new order",
    description="Creates an order for a client and requests its payment. Returns the payment QR code.",
)
async def create_order(data: OrderCreate, service: OrderServiceDep) -> OrderCreateResponse:
    """Create an order and request its payment.

    If the payment service fails the order is still recorded, in the
    received status and without a payment reference, and 502 is returned.
    """
    result = await service.create_order(
        client_id=data.client_id,
        product_ids=data.product_ids,
        total_amount=data.total_amount,
    )
    return OrderCreateResponse(**result)


@router.patch(
    "/{order_id}/status",
    response_model=OrderResponse,
    responses={**_ERROR_RESPONSES, 409: {"description": "Transition not allowed"}},
    summary="Update the status of an order",
)
async def update_order_status(
    order_id: UUID,
    data: OrderStatusUpdate,
    service: OrderServiceDep,
) -> OrderResponse:
    """Move an order to a new status."""
    logger.debug("Received request to update order ID: %s with status: %s", order_id, data.status)
    order = await service.update_order_status(order_id, data.status)
    return OrderResponse(**order)


@router.get(
    "",
    response_model=OrderListResponse,
    responses=_ERROR_RESPONSES,
    summary="List orders",
    description=(
        "Returns orders in the given status, oldest first. Without a status, returns the "
        "kitchen queue: every received, preparing and ready order. An empty result is a 404."
    ),
)
async def list_orders(
    service: OrderServiceDep,
    order_status: str | None = Query(default=None, alias="status", description="Order status filter"),
) -> OrderListResponse:
    """List orders by status."""
    orders = await service.list_orders(order_status)
    return OrderListResponse(items=[OrderResponse(**order) for order in orders])


@router.get(
    "/{order_id}",
    response_model=OrderResponse,
    responses={404: {"description": "Order not found"}},
    summary="Get order by ID",
)
async def get_order(order_id: UUID, service: OrderServiceDep) -> OrderResponse:
    """Get a single order by ID."""
    order = await service.get_order(order_id)
    return OrderResponse(**order)
