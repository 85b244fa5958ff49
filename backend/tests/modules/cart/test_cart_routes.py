"""Tests for POST /api/cart/summary."""

import pytest
from fastapi.testclient import TestClient

from api.app import create_app
from shared.models import Role

from tests.conftest import create_test_token, make_settings, override_sessions


@pytest.fixture
def app():
    """Create a fresh app for each test."""
    app = create_app()
    override_sessions(app)
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)


def bearer(role: Role) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_test_token(role=role)}"}


class TestCartSummary:
    def test_summary_merges_and_totals(self, client):
        response = client.post(
            "/api/cart/summary",
            json={
                "items": [
                    {"productId": "p1", "name": "Kibble", "price": "19.99", "quantity": 1},
                    {"productId": "p2", "name": "Leash", "price": "5.50", "quantity": 1},
                    {"productId": "p1", "name": "Kibble", "price": "19.99", "quantity": 1},
                ]
            },
            headers=bearer(Role.OWNER),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["itemCount"] == 3
        assert len(data["items"]) == 2
        assert data["subtotal"] == "45.48"
        assert data["platformFee"] == "0.91"
        assert data["total"] == "45.48"

    def test_empty_cart(self, client):
        response = client.post("/api/cart/summary", json={"items": []}, headers=bearer(Role.VET))

        assert response.status_code == 200
        assert response.json()["total"] == "0.00"

    def test_fee_rate_from_settings(self, app, client):
        override_sessions(app, make_settings(platform_fee_rate="0.10"))

        response = client.post(
            "/api/cart/summary",
            json={"items": [{"productId": "p1", "price": "10.00"}]},
            headers=bearer(Role.OWNER),
        )

        assert response.json()["platformFee"] == "1.00"

    def test_supplier_cannot_place_orders(self, client):
        response = client.post("/api/cart/summary", json={"items": []}, headers=bearer(Role.SUPPLIER))

        assert response.status_code == 403
        assert response.json()["error"] == "INSUFFICIENT_PERMISSIONS"

    def test_requires_session(self, client):
        response = client.post("/api/cart/summary", json={"items": []})

        assert response.status_code == 401

    def test_rejects_zero_quantity(self, client):
        response = client.post(
            "/api/cart/summary",
            json={"items": [{"productId": "p1", "price": "1.00", "quantity": 0}]},
            headers=bearer(Role.OWNER),
        )

        assert response.status_code == 422
