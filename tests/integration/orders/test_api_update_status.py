"""Integration tests for PATCH /api/v1/orders/{id}/status/."""

from __future__ import annotations

from uuid import uuid4

import pytest

from modules.orders.constants import OrderStatus

pytestmark = pytest.mark.integration


def _url(order_id):
    return f"/api/v1/orders/{order_id}/status/"


class TestUpdateStatus:
    def test_pending_to_completed_leaves_stock_alone(
        self, api_client, product_factory, order_factory
    ):
        product = product_factory(stock_quantity=7)
        order = order_factory({product: 3})

        response = api_client.patch(_url(order.id), {"status": "completed"}, format="json")

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "completed"
        order.refresh_from_db()
        assert order.status == OrderStatus.COMPLETED
        product.refresh_from_db()
        assert product.stock_quantity == 7
        assert order.items.get().quantity == 3

    @pytest.mark.parametrize(
        ("current", "new"),
        [
            (OrderStatus.CANCELLED, "pending"),
            (OrderStatus.COMPLETED, "cancelled"),
            (OrderStatus.PENDING, "pending"),
        ],
    )
    def test_any_transition_is_allowed(self, api_client, order_factory, current, new):
        order = order_factory(status=current)

        response = api_client.patch(_url(order.id), {"status": new}, format="json")

        assert response.status_code == 200
        assert response.json()["data"]["status"] == new

    def test_invalid_status_is_422(self, api_client, order_factory):
        order = order_factory()

        response = api_client.patch(_url(order.id), {"status": "shipped"}, format="json")

        assert response.status_code == 422
        assert response.json()["errors"][0]["attr"] == "status"
        order.refresh_from_db()
        assert order.status == OrderStatus.PENDING

    def test_missing_status_is_422(self, api_client, order_factory):
        response = api_client.patch(_url(order_factory().id), {}, format="json")

        assert response.status_code == 422
        assert response.json()["errors"][0]["code"] == "required"

    def test_unknown_order_is_404(self, api_client):
        response = api_client.patch(_url(uuid4()), {"status": "completed"}, format="json")

        assert response.status_code == 404
        assert response.json()["errors"][0]["code"] == "order_not_found"
