"""Global error handling middleware and application error types."""

import logging
import traceback
from typing import Any, Callable

from fastapi import HTTPException, Request, Response, status
from fastapi.responses import JSONResponse

from src.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base exception for API errors.

    Use this class to raise application-specific errors that should
    be returned to the client with a specific status code and message.
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_type: str = "api_error",
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        """Initialize API error.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code to return.
            error_type: Error category/type for client handling.
            details: Optional additional error details.
        """
        self.message = message
        self.status_code = status_code
        self.error_type = error_type
        self.details = details
        super().__init__(message)


class NotFoundError(APIError):
    """Resource not found error."""

    def __init__(
        self,
        message: str = "Resource not found",
        details: list[dict[str, Any]] | None = None,
        error_type: str = "not_found",
    ) -> None:
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            error_type=error_type,
            details=details,
        )


class BadRequestError(APIError):
    """Malformed or unacceptable input error."""

    def __init__(
        self,
        message: str = "Bad request",
        details: list[dict[str, Any]] | None = None,
        error_type: str = "bad_request",
    ) -> None:
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_type=error_type,
            details=details,
        )


class ConflictError(APIError):
    """Request conflicts with the current state of the resource."""

    def __init__(
        self,
        message: str = "Conflict",
        details: list[dict[str, Any]] | None = None,
        error_type: str = "conflict",
    ) -> None:
        super().__init__(
            message=message,
            status_code=status.HTTP_409_CONFLICT,
            error_type=error_type,
            details=details,
        )


class PersistenceError(APIError):
    """Database read or write failure."""

    def __init__(
        self,
        message: str = "Database operation failed",
        details: list[dict[str, Any]] | None = None,
        error_type: str = "persistence_error",
    ) -> None:
        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_type=error_type,
            details=details,
        )


class UpstreamServiceError(APIError):
    """Failure of an external service the request depends on."""

    def __init__(
        self,
        message: str = "Upstream service failed",
        details: list[dict[str, Any]] | None = None,
        error_type: str = "upstream_error",
    ) -> None:
        super().__init__(
            message=message,
            status_code=status.HTTP_502_BAD_GATEWAY,
            error_type=error_type,
            details=details,
        )


# Order lifecycle errors


class ClientNotFoundError(NotFoundError):
    """The client referenced by a new order does not exist."""

    def __init__(self, client_id: str) -> None:
        super().__init__(
            message="Client not found",
            details=[{"loc": ["client_id"], "msg": f"No client with id {client_id}", "type": "not_found"}],
            error_type="client_not_found",
        )
        self.client_id = client_id


class ProductsNotFoundError(NotFoundError):
    """One or more products referenced by a new order do not exist."""

    def __init__(self, missing_ids: list[str]) -> None:
        super().__init__(
            message="One or more products not found",
            details=[
                {"loc": ["product_ids"], "msg": f"No product with id {product_id}", "type": "not_found"}
                for product_id in missing_ids
            ],
            error_type="products_not_found",
        )
        self.missing_ids = missing_ids


class OrderNotFoundError(NotFoundError):
    """No order exists with the requested id."""

    def __init__(self, order_id: str) -> None:
        super().__init__(
            message=f"Order with ID {order_id} not found",
            error_type="order_not_found",
        )
        self.order_id = order_id


class OrdersNotFoundError(NotFoundError):
    """An order listing matched no rows."""

    def __init__(self, statuses: list[str]) -> None:
        super().__init__(
            message="No orders found",
            details=[{"loc": ["status"], "msg": f"No orders in status {', '.join(statuses)}", "type": "empty"}],
            error_type="orders_not_found",
        )
        self.statuses = statuses


class InvalidStatusError(BadRequestError):
    """A status string is not a member of the order status enumeration."""

    def __init__(self, value: str) -> None:
        super().__init__(
            message="Invalid status provided",
            details=[{"loc": ["status"], "msg": f"Unknown order status {value!r}", "type": "invalid_status"}],
            error_type="invalid_status",
        )
        self.value = value


class InvalidTransitionError(ConflictError):
    """A status change is not allowed from the order's current status."""

    def __init__(self, current: str, target: str) -> None:
        super().__init__(
            message=f"Cannot move order from {current} to {target}",
            error_type="invalid_transition",
        )
        self.current = current
        self.target = target


class OrderPersistenceError(PersistenceError):
    """A new order could not be stored."""

    def __init__(self, message: str = "Failed to create order") -> None:
        super().__init__(message=message, error_type="order_persistence_failed")


class OrderUpdateError(PersistenceError):
    """An order status change could not be stored."""

    def __init__(self, message: str = "Failed to update order status") -> None:
        super().__init__(message=message, error_type="order_update_failed")


class OrderQueryError(PersistenceError):
    """Orders could not be read from the store."""

    def __init__(self, message: str = "Failed to fetch orders") -> None:
        super().__init__(message=message, error_type="order_query_failed")


class PaymentFailedError(UpstreamServiceError):
    """The payment service failed or returned no payment reference."""

    def __init__(self, message: str = "Payment processing failed") -> None:
        super().__init__(message=message, error_type="payment_failed")


def create_error_response(
    error_type: str,
    message: str,
    status_code: int,
    details: list[dict[str, Any]] | None = None,
    request_id: str | None = None,
) -> JSONResponse:
    """Create a standardized JSON error response.

    Args:
        error_type: Error category for client handling.
        message: Human-readable error description.
        status_code: HTTP status code.
        details: Optional error details.
        request_id: Optional request ID for tracing.

    Returns:
        JSONResponse: Formatted error response.
    """
    error_response = ErrorResponse.from_exception(
        error_type=error_type,
        message=message,
        details=details,
        request_id=request_id,
    )
    return JSONResponse(
        status_code=status_code,
        content=error_response.model_dump(mode="json", exclude_none=True),
    )


async def error_handler_middleware(request: Request, call_next: Callable[[Request], Any]) -> Response:
    """Middleware to catch and format all exceptions.

    Ensures consistent error response format across the application.
    Logs full stack traces for debugging while returning safe messages to clients.

    Args:
        request: The incoming request.
        call_next: Next middleware or route handler.

    Returns:
        Response: Either the successful response or formatted error response.
    """
    # Extract request ID if present (can be set by upstream middleware/load balancer)
    request_id = request.headers.get("X-Request-ID")

    try:
        response = await call_next(request)
        return response

    except APIError as e:
        logger.warning(
            "API error: %s - %s",
            e.error_type,
            e.message,
            extra={"request_id": request_id, "status_code": e.status_code},
        )
        return create_error_response(
            error_type=e.error_type,
            message=e.message,
            status_code=e.status_code,
            details=e.details,
            request_id=request_id,
        )

    except HTTPException as e:
        logger.warning(
            "HTTP exception: %s - %s",
            e.status_code,
            e.detail,
            extra={"request_id": request_id},
        )
        return create_error_response(
            error_type="http_error",
            message=str(e.detail),
            status_code=e.status_code,
            request_id=request_id,
        )

    except Exception as e:
        # Unexpected exceptions - log full stack trace
        logger.error(
            "Unhandled exception: %s\n%s",
            str(e),
            traceback.format_exc(),
            extra={"request_id": request_id},
        )
        return create_error_response(
            error_type="internal_error",
            message="An unexpected error occurred",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            request_id=request_id,
        )
