"""Order domain exceptions.

Raised by the reconciler and the service while a transaction is open.
They never reach the API layer: the service's transaction boundary
converts them into a failed ``ServiceResult`` (see ``to_error``) and
rolls the transaction back.
"""

from __future__ import annotations

from typing import Iterable, Optional
from uuid import UUID

from modules.core.results import ErrorKind, ServiceError


class OrderDomainError(Exception):
    """Base class; subclasses pin the error kind and code."""

    kind: ErrorKind = ErrorKind.RECONCILIATION
    code: str = "reconciliation_error"
    attr: Optional[str] = None

    def to_error(self) -> ServiceError:
        return ServiceError(kind=self.kind, detail=str(self), code=self.code, attr=self.attr)


class OrderNotFound(OrderDomainError):
    """The requested order does not exist."""

    kind = ErrorKind.NOT_FOUND
    code = "order_not_found"

    def __init__(self, order_id: object) -> None:
        super().__init__(f"Order {order_id} not found.")
        self.order_id = order_id


class ProductNotFound(OrderDomainError):
    """One or more products referenced by the requested items do not exist."""

    kind = ErrorKind.NOT_FOUND
    code = "product_not_found"
    attr = "items"

    def __init__(self, product_ids: Iterable[UUID]) -> None:
        self.product_ids = sorted(product_ids, key=str)
        listed = ", ".join(str(pid) for pid in self.product_ids)
        super().__init__(f"Product(s) not found: {listed}.")


class InsufficientStock(OrderDomainError):
    """Not enough stock to cover a line under the ``reject`` oversell policy."""

    code = "insufficient_stock"
    attr = "items"

    def __init__(self, product_id: UUID, requested: int, available: int) -> None:
        super().__init__(
            f"Insufficient stock for product {product_id}: "
            f"requested {requested}, available {available}."
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class ReconciliationError(OrderDomainError):
    """A stock or line-item mutation failed while applying a reconciliation."""
