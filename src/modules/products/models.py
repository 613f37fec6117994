"""Product model: catalog entry plus its available stock.

- ``price`` is the current unit price; order lines snapshot it when they
  are created, so later price changes never touch existing lines.
- ``stock_quantity`` is changed only through the stock primitives in
  ``ProductDjangoRepository`` (single ``UPDATE ... SET stock = stock +/- n``
  statements), never by read-modify-write in Python.  It is a signed
  column: whether it may go negative is an order-policy decision
  (``ORDERS_OVERSELL_POLICY``), not a schema rule.
"""

from __future__ import annotations

from decimal import Decimal

import structlog

from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel

logger = structlog.get_logger(__name__)


class Product(BaseModel):
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    stock_quantity = models.IntegerField(default=0)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )

    class Meta:
        db_table = "products"
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="products_price_non_negative",
            ),
        ]

    def save(self, *args, **kwargs) -> None:
        is_new = self._state.adding
        super().save(*args, **kwargs)
        if is_new:
            logger.info(
                "product.created",
                product_id=str(self.id),
                name=self.name,
                stock_quantity=self.stock_quantity,
            )

    def __str__(self) -> str:
        return f"{self.name} ({self.stock_quantity} in stock)"
