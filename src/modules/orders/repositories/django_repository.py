"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.  Reads
eager-load ``items__product`` so serializing an order never triggers
N+1 queries.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.utils import timezone

from modules.orders.models import Order, OrderItem
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    def _queryset(self):
        return Order.objects.prefetch_related("items__product")

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Returns ``None`` for non-existent or invalid IDs."""
        try:
            return self._queryset().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, status: Optional[str] = None) -> List[Order]:
        queryset = self._queryset()
        if status is not None:
            queryset = queryset.filter(status=status)
        return list(queryset)

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def create(self) -> Order:
        order = Order()
        order.save()
        logger.info(
            "order.persisted", order_id=str(order.id), order_number=order.order_number
        )
        return order

    def save(self, entity: Order) -> Order:
        entity.save()
        return entity

    def update_status(self, id: str, status: str) -> bool:
        try:
            updated = Order.objects.filter(id=id).update(
                status=status, updated_at=timezone.now()
            )
        except (ValueError, ValidationError):
            return False
        return updated > 0

    def delete(self, id: str) -> bool:
        try:
            deleted, _ = Order.objects.filter(id=id).delete()
        except (ValueError, ValidationError):
            return False
        logger.info("order.removed", order_id=str(id), rows=deleted)
        return deleted > 0

    # ------------------------------------------------------------------
    # Line items
    # ------------------------------------------------------------------

    def add_item(
        self, order_id: UUID, product_id: UUID, quantity: int, price: Decimal
    ) -> OrderItem:
        item = OrderItem(
            order_id=order_id,
            product_id=product_id,
            quantity=quantity,
            price=price,
        )
        item.save()
        return item

    def update_item_quantity(self, item_id: UUID, quantity: int) -> int:
        return OrderItem.objects.filter(id=item_id).update(
            quantity=quantity, updated_at=timezone.now()
        )

    def delete_item(self, item_id: UUID) -> int:
        deleted, _ = OrderItem.objects.filter(id=item_id).delete()
        return deleted
