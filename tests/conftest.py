from decimal import Decimal

import pytest

from rest_framework.test import APIClient

from modules.orders.constants import OrderStatus
from modules.orders.models import Order, OrderItem
from modules.products.models import Product


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def product_factory():
    """Create products; stock and price default to 10 units at 10.00."""
    counter = {"n": 0}

    def make(stock_quantity=10, price=Decimal("10.00"), name=None):
        counter["n"] += 1
        return Product.objects.create(
            name=name or f"Product {counter['n']}",
            description="Test product",
            stock_quantity=stock_quantity,
            price=price,
        )

    return make


@pytest.fixture()
def order_factory():
    """Persist an order with the given ``{product: quantity}`` lines.

    Writes rows directly (no stock movement), mirroring data that already
    exists before an operation runs.
    """

    def make(lines=None, status=OrderStatus.PENDING):
        order = Order.objects.create(status=status)
        for product, quantity in (lines or {}).items():
            OrderItem.objects.create(
                order=order, product=product, quantity=quantity, price=product.price
            )
        return order

    return make
