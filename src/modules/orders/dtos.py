"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.  They are the
contract between the API layer (DRF serializers) and ``OrderService``;
everything in them has already been validated, so the service can start
mutating state straight away.  DTOs are immutable (``frozen=True``).
"""

from __future__ import annotations

from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from modules.orders.constants import MAX_LINE_QUANTITY, OrderStatus


def _check_status(value: str) -> str:
    if value not in OrderStatus.values:
        allowed = ", ".join(OrderStatus.values)
        raise ValueError(f"Status must be one of: {allowed}.")
    return value


class OrderItemDTO(BaseModel):
    """One requested line: ``quantity`` units of ``product_id``."""

    model_config = ConfigDict(frozen=True)

    product_id: UUID
    quantity: int

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        if v > MAX_LINE_QUANTITY:
            raise ValueError(f"Quantity must be at most {MAX_LINE_QUANTITY}.")
        return v


class OrderItemsDTO(BaseModel):
    """Requested item set for create / update-items.

    Validates:
    - ``items`` must contain at least one item.
    - A product may appear only once.
    """

    model_config = ConfigDict(frozen=True)

    items: List[OrderItemDTO]

    @field_validator("items")
    @classmethod
    def items_must_not_be_empty(cls, v: List[OrderItemDTO]) -> List[OrderItemDTO]:
        if not v:
            raise ValueError("Order must have at least one item.")
        return v

    @model_validator(mode="after")
    def no_duplicate_products(self):
        product_ids = [item.product_id for item in self.items]
        if len(product_ids) != len(set(product_ids)):
            raise ValueError("Duplicate product IDs are not allowed in the same order.")
        return self

    def as_target(self) -> Dict[UUID, int]:
        """Requested quantities keyed by product id, in request order."""
        return {item.product_id: item.quantity for item in self.items}


class OrderListFilterDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Optional[str] = None

    @field_validator("status")
    @classmethod
    def status_must_be_known(cls, v: Optional[str]) -> Optional[str]:
        return v if v is None else _check_status(v)


class UpdateOrderStatusDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: str

    @field_validator("status")
    @classmethod
    def status_must_be_known(cls, v: str) -> str:
        return _check_status(v)
