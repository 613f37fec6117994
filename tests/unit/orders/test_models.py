"""Unit tests for Order / OrderItem models."""

from __future__ import annotations

import re
from decimal import Decimal
from unittest.mock import patch

import pytest
from django.db import IntegrityError, transaction

from modules.orders.constants import ORDER_NUMBER_MAX_RETRIES, OrderStatus
from modules.orders.models import Order, OrderItem

pytestmark = pytest.mark.unit

ORDER_NUMBER_RE = re.compile(r"^ORD-\d{8}-[0-9A-F]{6}$")


class TestOrderNumber:
    def test_generated_on_first_save(self):
        order = Order.objects.create()
        assert ORDER_NUMBER_RE.match(order.order_number)

    def test_defaults_to_pending(self):
        assert Order.objects.create().status == OrderStatus.PENDING

    def test_kept_on_later_saves(self):
        order = Order.objects.create()
        number = order.order_number

        order.status = OrderStatus.COMPLETED
        order.save()

        assert order.order_number == number

    def test_collision_retries_with_new_candidate(self):
        existing = Order.objects.create()
        with patch.object(
            Order,
            "generate_order_number",
            side_effect=[existing.order_number, "ORD-20240101-ABCDEF"],
        ):
            order = Order.objects.create()
        assert order.order_number == "ORD-20240101-ABCDEF"

    def test_gives_up_after_max_retries(self):
        existing = Order.objects.create()
        with patch.object(
            Order, "generate_order_number", return_value=existing.order_number
        ) as generate:
            with pytest.raises(RuntimeError, match="unique order_number"):
                Order.objects.create()
        assert generate.call_count == ORDER_NUMBER_MAX_RETRIES


class TestOrderItem:
    def test_one_line_per_product(self, product_factory):
        product = product_factory()
        order = Order.objects.create()
        OrderItem.objects.create(order=order, product=product, quantity=1, price=product.price)

        with pytest.raises(IntegrityError):
            with transaction.atomic():
                OrderItem.objects.create(
                    order=order, product=product, quantity=2, price=product.price
                )

    def test_items_cascade_with_order(self, product_factory, order_factory):
        product = product_factory()
        order = order_factory({product: 2})

        order.delete()

        assert not OrderItem.objects.filter(product=product).exists()

    def test_price_is_a_snapshot(self, product_factory, order_factory):
        product = product_factory(price=Decimal("10.00"))
        order = order_factory({product: 1})

        product.price = Decimal("99.00")
        product.save()

        assert order.items.get().price == Decimal("10.00")
