"""Order DRF serializers for API input/output.

Input serializers validate request shape before the service runs; the
view then hands the validated data to the Service Layer as Pydantic DTOs
from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.constants import MAX_LINE_QUANTITY, OrderStatus
from modules.orders.models import Order, OrderItem
from modules.products.serializers import ProductSerializer

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class OrderItemInputSerializer(serializers.Serializer):
    """Validates a single requested line."""

    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, max_value=MAX_LINE_QUANTITY)


class OrderItemsInputSerializer(serializers.Serializer):
    """Validates the body of create / update-items requests."""

    items = OrderItemInputSerializer(many=True, allow_empty=False)

    def validate_items(self, value):
        product_ids = [item["product_id"] for item in value]
        if len(product_ids) != len(set(product_ids)):
            raise serializers.ValidationError(
                "Each product may appear only once per order.", code="duplicate_product"
            )
        return value


class OrderListQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices, required=False)


class OrderStatusInputSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderItemSerializer(serializers.ModelSerializer):
    """Line item with its price snapshot and the current product record."""

    product = ProductSerializer(read_only=True)

    class Meta:
        model = OrderItem
        fields = ["id", "product_id", "quantity", "price", "product"]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "status",
            "created_at",
            "updated_at",
            "items",
        ]
        read_only_fields = fields
