"""Order Pydantic schemas for API request/response models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class OrderLineItemSchema(BaseModel):
    """Schema for a line item snapshot in an order."""

    model_config = ConfigDict(from_attributes=True)

    product_id: str = Field(description="Product UUID")
    name: str = Field(description="Product name at order time")
    unit_price: float = Field(ge=0, description="Unit price at order time")


class OrderClientSchema(BaseModel):
    """Client associated with an order."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(description="Client UUID")
    name: str | None = Field(default=None, description="Client name")
    email: str | None = Field(default=None, description="Client email")


class OrderProductSchema(BaseModel):
    """Current catalog record of a product in an order."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(description="Product UUID")
    name: str = Field(description="Product name")
    description: str | None = Field(default=None, description="Product description")
    price: float = Field(description="Current product price")
    category: str | None = Field(default=None, description="Product category")
    image_url: str | None = Field(default=None, description="Product image URL")


class OrderCreate(BaseModel):
    """Schema for creating an order via POST /orders."""

    model_config = ConfigDict(from_attributes=True)

    client_id: UUID = Field(description="Client UUID")
    product_ids: list[UUID] = Field(min_length=1, description="Product UUIDs in the order")
    total_amount: float = Field(ge=0, description="Total amount charged for the order")


class OrderCreateResponse(BaseModel):
    """Schema for order creation response."""

    model_config = ConfigDict(from_attributes=True)

    order_id: UUID = Field(description="Created order UUID")
    payment_reference: str = Field(description="Payment QR code returned by the payment service")


class OrderStatusUpdate(BaseModel):
    """Schema for PATCH /orders/{order_id}/status.

    The status is kept as a plain string so that unknown values reach the
    order service, which reports them as invalid statuses.
    """

    status: str = Field(description="New order status")


class OrderResponse(BaseModel):
    """Schema for order API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(description="Order unique identifier")
    client_id: UUID = Field(description="Client UUID")
    client: OrderClientSchema | None = Field(default=None, description="Client record, if it still exists")
    product_ids: list[str] = Field(default_factory=list, description="Product UUIDs in the order")
    products: list[OrderProductSchema] = Field(default_factory=list, description="Current product records")
    line_items: list[OrderLineItemSchema] = Field(default_factory=list, description="Line item snapshots")
    total_amount: float = Field(description="Total amount of the order")
    status: str = Field(description="Order status")
    payment_reference: str | None = Field(default=None, description="Payment QR code, if payment succeeded")
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime | None = Field(default=None, description="Last update timestamp")


class OrderListResponse(BaseModel):
    """Schema for order list API responses."""

    model_config = ConfigDict(from_attributes=True)

    items: list[OrderResponse] = Field(description="List of orders")
