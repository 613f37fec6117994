"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Look-ups follow the Null Object pattern (``None`` / missing keys instead
of exceptions); stock primitives report the number of rows they touched
and leave the interpretation to the caller.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional
from uuid import UUID

import structlog

from django.core.exceptions import ValidationError
from django.db.models import F
from django.utils import timezone

from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Product]:
        """Retrieve a product by primary key.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return Product.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_many(self, ids: Iterable[UUID]) -> Dict[UUID, Product]:
        return {product.id: product for product in Product.objects.filter(id__in=list(ids))}

    def list(self) -> List[Product]:
        return list(Product.objects.all())

    def save(self, entity: Product) -> Product:
        """Persist (create or update) a product."""
        entity.save()
        logger.info("product.saved", product_id=str(entity.id))
        return entity

    # ------------------------------------------------------------------
    # Stock primitives
    # ------------------------------------------------------------------

    def increment_stock(self, id: UUID, quantity: int) -> int:
        updated = Product.objects.filter(id=id).update(
            stock_quantity=F("stock_quantity") + quantity,
            updated_at=timezone.now(),
        )
        logger.info(
            "stock.incremented", product_id=str(id), quantity=quantity, rows=updated
        )
        return updated

    def decrement_stock(
        self, id: UUID, quantity: int, allow_negative: bool = False
    ) -> int:
        queryset = Product.objects.filter(id=id)
        if not allow_negative:
            # Conditional update: the availability check and the write are
            # one statement, so concurrent orders cannot both pass it.
            queryset = queryset.filter(stock_quantity__gte=quantity)
        updated = queryset.update(
            stock_quantity=F("stock_quantity") - quantity,
            updated_at=timezone.now(),
        )
        logger.info(
            "stock.decremented", product_id=str(id), quantity=quantity, rows=updated
        )
        return updated
