"""Pytest configuration and fixtures."""

import os
from collections.abc import Generator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

# Set test environment variables before importing application modules
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SECRET_KEY", "test-secret-key")
os.environ.setdefault("PAYMENT_SERVICE_URL", "http://payments.test")
os.environ.setdefault("PRODUCTION_SERVICE_URL", "http://production.test")

CLIENT_ID = "550e8400-e29b-41d4-a716-446655440000"
PRODUCT_ID = "770e8400-e29b-41d4-a716-446655440001"
OTHER_PRODUCT_ID = "770e8400-e29b-41d4-a716-446655440002"
ORDER_ID = "660e8400-e29b-41d4-a716-446655440000"


@pytest.fixture
def sample_client() -> dict:
    """Create a sample client row."""
    return {
        "id": CLIENT_ID,
        "name": "Maria Silva",
        "email": "maria@example.com",
        "cpf": "12345678900",
    }


@pytest.fixture
def sample_products() -> list[dict]:
    """Create sample product rows."""
    return [
        {
            "id": PRODUCT_ID,
            "name": "X-Burger",
            "description": "Burger with cheese",
            "price": 12.5,
            "category": "Lanches",
            "image_url": None,
        },
        {
            "id": OTHER_PRODUCT_ID,
            "name": "Refrigerante",
            "description": "Lata 350ml",
            "price": 6.0,
            "category": "Bebida",
            "image_url": None,
        },
    ]


@pytest.fixture
def sample_order(sample_client: dict, sample_products: list[dict]) -> dict:
    """Create a sample order row with associations."""
    return {
        "id": ORDER_ID,
        "client_id": CLIENT_ID,
        "product_ids": [PRODUCT_ID],
        "line_items": [{"product_id": PRODUCT_ID, "name": "X-Burger", "unit_price": 12.5}],
        "total_amount": 12.5,
        "status": "received",
        "payment_reference": "qr-code-123",
        "created_at": "2026-01-10T12:00:00+00:00",
        "updated_at": "2026-01-10T12:00:00+00:00",
        "client": sample_client,
        "products": [sample_products[0]],
    }


@pytest.fixture
def mock_order_service() -> MagicMock:
    """Provide an OrderService double with async methods."""
    service = MagicMock()
    service.create_order = AsyncMock()
    service.update_order_status = AsyncMock()
    service.list_orders = AsyncMock()
    service.get_order = AsyncMock()
    return service


@pytest.fixture
def client(mock_order_service: MagicMock) -> Generator[TestClient, None, None]:
    """Provide a test client with the order service overridden.

    Args:
        mock_order_service: OrderService double.

    Yields:
        TestClient: FastAPI test client.
    """
    from src.api.deps import get_order_service
    from src.main import app

    app.dependency_overrides[get_order_service] = lambda: mock_order_service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
