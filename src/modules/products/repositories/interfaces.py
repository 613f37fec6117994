"""Product repository interface.

Extends ``IRepository[Product]`` with the stock primitives the order
reconciler relies on.  Increments and decrements are single atomic
statements at the storage layer; callers never read, adjust and write
back a quantity themselves.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Dict, Iterable
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for products and their stock."""

    @abstractmethod
    def get_many(self, ids: Iterable[UUID]) -> Dict[UUID, Product]:
        """Load several products in one query, keyed by id.

        Unknown ids are simply absent from the result.
        """

    @abstractmethod
    def increment_stock(self, id: UUID, quantity: int) -> int:
        """Add ``quantity`` to the product's stock.

        Returns the number of rows updated (0 when the product is missing).
        """

    @abstractmethod
    def decrement_stock(
        self, id: UUID, quantity: int, allow_negative: bool = False
    ) -> int:
        """Take ``quantity`` from the product's stock.

        Unless ``allow_negative`` is set, the update only applies when at
        least ``quantity`` units are available.  Returns the number of rows
        updated: 0 means the product is missing or short of stock.
        """
