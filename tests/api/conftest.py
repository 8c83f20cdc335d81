"""Shared fixtures for API tests."""

from collections.abc import Iterator
from typing import Any

import pytest
from fastapi.testclient import TestClient

from app.infrastructure.database import get_session_factory
from app.main import app


@pytest.fixture
def client(session_factory, reference_data) -> Iterator[TestClient]:
    """Create test client backed by the test database."""
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def product_payload(reference_data: dict[str, int]) -> dict[str, Any]:
    """Create request body for a product with images and variants."""
    return {
        "name": "Linen Shirt",
        "slug": "linen-shirt",
        "description": "Breathable summer shirt",
        "price": "49.90",
        "discount_price": "39.90",
        "category_id": reference_data["clothing"],
        "stock": 12,
        "is_featured": True,
        "images": [
            {"url": "https://cdn.example.com/linen-front.jpg", "is_primary": True},
            {"url": "https://cdn.example.com/linen-back.jpg"},
        ],
        "variants": [
            {
                "sku": "LS-RED-S",
                "stock": 5,
                "attribute_value_ids": [reference_data["red"], reference_data["small"]],
            },
            {
                "sku": "LS-BLUE-M",
                "stock": 7,
                "price_adjustment": "2.50",
                "attribute_value_ids": [reference_data["blue"], reference_data["medium"]],
            },
        ],
    }


@pytest.fixture
def created_product(
    client: TestClient, admin_headers: dict[str, str], product_payload: dict[str, Any]
) -> int:
    """Create the sample product through the API and return its id."""
    response = client.post("/products", json=product_payload, headers=admin_headers)
    assert response.status_code == 201
    return response.json()["product_id"]
