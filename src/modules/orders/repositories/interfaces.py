"""Order repository interface.

Extends ``IRepository[Order]`` with the operations the reconciler needs
on the line items of the Order aggregate.  None of these methods open a
transaction: the service owns the unit of work.
"""

from __future__ import annotations

from abc import abstractmethod
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderItem


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root."""

    @abstractmethod
    def create(self) -> Order:
        """Create an empty ``pending`` order with a generated order number."""

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with its items and their products prefetched."""

    @abstractmethod
    def list(self, status: Optional[str] = None) -> List[Order]:
        """List orders, newest first, optionally restricted to one status."""

    @abstractmethod
    def update_status(self, id: str, status: str) -> bool:
        """Set the order's status.  ``False`` when the order does not exist."""

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Remove the order (its remaining line items go with it)."""

    # ------------------------------------------------------------------
    # Line items
    # ------------------------------------------------------------------

    @abstractmethod
    def add_item(
        self, order_id: UUID, product_id: UUID, quantity: int, price: Decimal
    ) -> OrderItem:
        """Create a line item with the given price snapshot."""

    @abstractmethod
    def update_item_quantity(self, item_id: UUID, quantity: int) -> int:
        """Change a line's quantity; returns the number of rows updated."""

    @abstractmethod
    def delete_item(self, item_id: UUID) -> int:
        """Delete a line item; returns the number of rows deleted."""
