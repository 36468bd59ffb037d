"""Integration tests for order API endpoints."""

from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from src.api.middleware.error_handler import (
    ClientNotFoundError,
    InvalidStatusError,
    InvalidTransitionError,
    OrderNotFoundError,
    OrderPersistenceError,
    OrderQueryError,
    OrdersNotFoundError,
    PaymentFailedError,
    ProductsNotFoundError,
)

CLIENT_ID = "550e8400-e29b-41d4-a716-446655440000"
PRODUCT_ID = "770e8400-e29b-41d4-a716-446655440001"
ORDER_ID = "660e8400-e29b-41d4-a716-446655440000"


class TestCreateOrder:
    """Tests for POST /api/v1/orders endpoint."""

    def test_returns_201_with_payment_reference(
        self, client: TestClient, mock_order_service: MagicMock
    ) -> None:
        """Test that a created order returns its id and QR code."""
        mock_order_service.create_order.return_value = {
            "order_id": ORDER_ID,
            "payment_reference": "qr-code-123",
        }

        response = client.post(
            "/api/v1/orders",
            json={"client_id": CLIENT_ID, "product_ids": [PRODUCT_ID], "total_amount": 12.5},
        )

        assert response.status_code == 201
        assert response.json() == {"order_id": ORDER_ID, "payment_reference": "qr-code-123"}
        kwargs = mock_order_service.create_order.call_args.kwargs
        assert str(kwargs["client_id"]) == CLIENT_ID
        assert [str(pid) for pid in kwargs["product_ids"]] == [PRODUCT_ID]
        assert kwargs["total_amount"] == 12.5

    def test_returns_404_when_client_not_found(
        self, client: TestClient, mock_order_service: MagicMock
    ) -> None:
        """Test that an unknown client maps to 404."""
        mock_order_service.create_order.side_effect = ClientNotFoundError(CLIENT_ID)

        response = client.post(
            "/api/v1/orders",
            json={"client_id": CLIENT_ID, "product_ids": [PRODUCT_ID], "total_amount": 12.5},
        )

        assert response.status_code == 404
        data = response.json()
        assert data["error"] == "client_not_found"
        assert data["message"] == "Client not found"

    def test_returns_404_when_products_not_found(
        self, client: TestClient, mock_order_service: MagicMock
    ) -> None:
        """Test that missing products map to 404 with one detail per product."""
        mock_order_service.create_order.side_effect = ProductsNotFoundError([PRODUCT_ID])

        response = client.post(
            "/api/v1/orders",
            json={"client_id": CLIENT_ID, "product_ids": [PRODUCT_ID], "total_amount": 12.5},
        )

        assert response.status_code == 404
        data = response.json()
        assert data["error"] == "products_not_found"
        assert len(data["details"]) == 1

    def test_returns_502_when_payment_fails(
        self, client: TestClient, mock_order_service: MagicMock
    ) -> None:
        """Test that a payment failure maps to an upstream error."""
        mock_order_service.create_order.side_effect = PaymentFailedError()

        response = client.post(
            "/api/v1/orders",
            json={"client_id": CLIENT_ID, "product_ids": [PRODUCT_ID], "total_amount": 12.5},
        )

        assert response.status_code == 502
        assert response.json()["error"] == "payment_failed"

    def test_returns_500_when_order_cannot_be_stored(
        self, client: TestClient, mock_order_service: MagicMock
    ) -> None:
        """Test that a persistence failure returns a generic message."""
        mock_order_service.create_order.side_effect = OrderPersistenceError()

        response = client.post(
            "/api/v1/orders",
            json={"client_id": CLIENT_ID, "product_ids": [PRODUCT_ID], "total_amount": 12.5},
        )

        assert response.status_code == 500
        assert response.json()["message"] == "Failed to create order"

    def test_rejects_empty_product_list(
        self, client: TestClient, mock_order_service: MagicMock
    ) -> None:
        """Test that an order needs at least one product."""
        response = client.post(
            "/api/v1/orders",
            json={"client_id": CLIENT_ID, "product_ids": [], "total_amount": 12.5},
        )

        assert response.status_code == 422
        mock_order_service.create_order.assert_not_called()

    def test_rejects_malformed_ids(
        self, client: TestClient, mock_order_service: MagicMock
    ) -> None:
        """Test that ids must be UUIDs."""
        response = client.post(
            "/api/v1/orders",
            json={"client_id": "not-a-uuid", "product_ids": ["123"], "total_amount": 12.5},
        )

        assert response.status_code == 422
        mock_order_service.create_order.assert_not_called()


class TestUpdateOrderStatus:
    """Tests for PATCH /api/v1/orders/{order_id}/status endpoint."""

    def test_returns_updated_order(
        self, client: TestClient, mock_order_service: MagicMock, sample_order: dict
    ) -> None:
        """Test that the updated order is returned with its associations."""
        mock_order_service.update_order_status.return_value = {**sample_order, "status": "preparing"}

        response = client.patch(f"/api/v1/orders/{ORDER_ID}/status", json={"status": "preparing"})

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "preparing"
        assert data["client"]["id"] == CLIENT_ID
        assert data["products"][0]["id"] == PRODUCT_ID
        assert data["line_items"][0]["unit_price"] == 12.5
        args = mock_order_service.update_order_status.call_args.args
        assert str(args[0]) == ORDER_ID
        assert args[1] == "preparing"

    def test_passes_unknown_status_to_service(
        self, client: TestClient, mock_order_service: MagicMock
    ) -> None:
        """Test that an unknown status is reported as 400 by the service."""
        mock_order_service.update_order_status.side_effect = InvalidStatusError("Pronto")

        response = client.patch(f"/api/v1/orders/{ORDER_ID}/status", json={"status": "Pronto"})

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_status"

    def test_returns_404_when_order_not_found(
        self, client: TestClient, mock_order_service: MagicMock
    ) -> None:
        """Test that a missing order maps to 404."""
        mock_order_service.update_order_status.side_effect = OrderNotFoundError(ORDER_ID)

        response = client.patch(f"/api/v1/orders/{ORDER_ID}/status", json={"status": "ready"})

        assert response.status_code == 404
        assert response.json()["message"] == f"Order with ID {ORDER_ID} not found"

    def test_returns_409_for_disallowed_transition(
        self, client: TestClient, mock_order_service: MagicMock
    ) -> None:
        """Test that a forbidden transition maps to 409."""
        mock_order_service.update_order_status.side_effect = InvalidTransitionError("completed", "preparing")

        response = client.patch(f"/api/v1/orders/{ORDER_ID}/status", json={"status": "preparing"})

        assert response.status_code == 409
        assert response.json()["error"] == "invalid_transition"


class TestListOrders:
    """Tests for GET /api/v1/orders endpoint."""

    def test_returns_kitchen_queue_without_filter(
        self, client: TestClient, mock_order_service: MagicMock, sample_order: dict
    ) -> None:
        """Test that the default listing is requested without a status."""
        mock_order_service.list_orders.return_value = [sample_order]

        response = client.get("/api/v1/orders")

        assert response.status_code == 200
        assert [item["id"] for item in response.json()["items"]] == [ORDER_ID]
        mock_order_service.list_orders.assert_awaited_once_with(None)

    def test_passes_status_filter(
        self, client: TestClient, mock_order_service: MagicMock, sample_order: dict
    ) -> None:
        """Test that the status query parameter reaches the service."""
        mock_order_service.list_orders.return_value = [sample_order]

        response = client.get("/api/v1/orders", params={"status": "received"})

        assert response.status_code == 200
        mock_order_service.list_orders.assert_awaited_once_with("received")

    def test_empty_listing_returns_404(
        self, client: TestClient, mock_order_service: MagicMock
    ) -> None:
        """Test that no matching orders is reported distinctly."""
        mock_order_service.list_orders.side_effect = OrdersNotFoundError(["ready"])

        response = client.get("/api/v1/orders", params={"status": "ready"})

        assert response.status_code == 404
        assert response.json()["error"] == "orders_not_found"

    def test_store_failure_returns_500(
        self, client: TestClient, mock_order_service: MagicMock
    ) -> None:
        """Test that a store failure is distinct from an empty listing."""
        mock_order_service.list_orders.side_effect = OrderQueryError()

        response = client.get("/api/v1/orders")

        assert response.status_code == 500
        assert response.json()["error"] == "order_query_failed"


class TestGetOrder:
    """Tests for GET /api/v1/orders/{order_id} endpoint."""

    def test_returns_order(
        self, client: TestClient, mock_order_service: MagicMock, sample_order: dict
    ) -> None:
        """Test that a single order is returned."""
        mock_order_service.get_order.return_value = sample_order

        response = client.get(f"/api/v1/orders/{ORDER_ID}")

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == ORDER_ID
        assert data["total_amount"] == 12.5
        assert data["payment_reference"] == "qr-code-123"

    def test_order_without_client_is_returned(
        self, client: TestClient, mock_order_service: MagicMock, sample_order: dict
    ) -> None:
        """Test that an order whose client was deleted still renders."""
        mock_order_service.get_order.return_value = {**sample_order, "client": None}

        response = client.get(f"/api/v1/orders/{ORDER_ID}")

        assert response.status_code == 200
        assert response.json()["client"] is None

    def test_returns_404_when_missing(
        self, client: TestClient, mock_order_service: MagicMock
    ) -> None:
        """Test that a missing order maps to 404."""
        mock_order_service.get_order.side_effect = OrderNotFoundError(ORDER_ID)

        response = client.get(f"/api/v1/orders/{ORDER_ID}")

        assert response.status_code == 404

    def test_rejects_malformed_id(self, client: TestClient, mock_order_service: MagicMock) -> None:
        """Test that the order id must be a UUID."""
        response = client.get("/api/v1/orders/not-a-uuid")

        assert response.status_code == 422
        mock_order_service.get_order.assert_not_called()
