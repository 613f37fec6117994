"""Integration tests for GET /api/v1/orders/ and GET /api/v1/orders/{id}/."""

from __future__ import annotations

from uuid import uuid4

import pytest

from modules.orders.constants import OrderStatus

pytestmark = pytest.mark.integration

URL = "/api/v1/orders/"


class TestListOrders:
    def test_empty_list(self, api_client):
        response = api_client.get(URL)

        assert response.status_code == 200
        assert response.json() == {"data": []}

    def test_lists_orders_with_items(self, api_client, product_factory, order_factory):
        product = product_factory()
        order = order_factory({product: 2})

        response = api_client.get(URL)

        (data,) = response.json()["data"]
        assert data["id"] == str(order.id)
        assert data["items"][0]["quantity"] == 2
        assert data["items"][0]["product"]["id"] == str(product.id)

    def test_newest_first(self, api_client, order_factory):
        older = order_factory()
        newer = order_factory()

        ids = [o["id"] for o in api_client.get(URL).json()["data"]]

        assert ids == [str(newer.id), str(older.id)]

    def test_filter_by_status(self, api_client, order_factory):
        order_factory(status=OrderStatus.PENDING)
        completed = order_factory(status=OrderStatus.COMPLETED)

        response = api_client.get(URL, {"status": "completed"})

        assert response.status_code == 200
        assert [o["id"] for o in response.json()["data"]] == [str(completed.id)]

    def test_invalid_status_is_422_naming_status(self, api_client):
        response = api_client.get(URL, {"status": "invalid"})

        assert response.status_code == 422
        body = response.json()
        assert body["type"] == "validation_error"
        assert body["errors"][0]["attr"] == "status"


class TestRetrieveOrder:
    def test_retrieve(self, api_client, product_factory, order_factory):
        order = order_factory({product_factory(): 1})

        response = api_client.get(f"{URL}{order.id}/")

        assert response.status_code == 200
        assert response.json()["data"]["order_number"] == order.order_number

    @pytest.mark.parametrize("order_id", [uuid4(), "not-a-uuid"])
    def test_unknown_order_is_404(self, api_client, order_id):
        response = api_client.get(f"{URL}{order_id}/")

        assert response.status_code == 404
        assert response.json()["errors"][0]["code"] == "order_not_found"
