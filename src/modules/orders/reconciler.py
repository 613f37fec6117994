"""Inventory-consistent reconciliation of an order's line items.

Bringing an order from its current lines to a requested item set is a
three-way diff keyed by product id:

- **removed**: product in the order but not in the request.  Its quantity
  goes back to stock and the line is deleted.
- **retained**: product in both.  Stock moves by ``new - old`` and the line
  quantity is updated.  The line keeps its original price snapshot.
- **added**: product only in the request.  Stock is taken and a line is
  created at the product's current price.

``plan_reconciliation`` computes the diff without touching storage;
``OrderReconciler`` applies a plan through the repositories.  Applying
assumes the caller holds a transaction open: a failure halfway leaves
partial writes behind for that transaction to roll back.

For every product, ``stock_quantity`` plus the quantities on all order
lines stays constant across a reconciliation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Mapping, Tuple
from uuid import UUID

import structlog

from modules.orders.constants import OversellPolicy
from modules.orders.exceptions import InsufficientStock, ProductNotFound, ReconciliationError

if TYPE_CHECKING:
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Plan
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CurrentLine:
    item_id: Any
    product_id: UUID
    quantity: int


@dataclass(frozen=True)
class RetainedLine:
    item_id: Any
    product_id: UUID
    old_quantity: int
    new_quantity: int

    @property
    def delta(self) -> int:
        """Units to take from stock (negative: units to give back)."""
        return self.new_quantity - self.old_quantity


@dataclass(frozen=True)
class NewLine:
    product_id: UUID
    quantity: int


@dataclass(frozen=True)
class ReconciliationPlan:
    removed: Tuple[CurrentLine, ...] = ()
    retained: Tuple[RetainedLine, ...] = ()
    added: Tuple[NewLine, ...] = ()

    @property
    def changed(self) -> Tuple[RetainedLine, ...]:
        return tuple(line for line in self.retained if line.delta)

    @property
    def is_noop(self) -> bool:
        return not (self.removed or self.added or self.changed)

    @property
    def target_product_ids(self) -> Tuple[UUID, ...]:
        """Products the order references once the plan is applied."""
        return tuple(line.product_id for line in self.retained) + tuple(
            line.product_id for line in self.added
        )

    def stock_deltas(self) -> Dict[UUID, int]:
        """Units each product loses from stock (negative: units it regains)."""
        deltas: Dict[UUID, int] = {}
        for line in self.removed:
            deltas[line.product_id] = -line.quantity
        for line in self.changed:
            deltas[line.product_id] = line.delta
        for line in self.added:
            deltas[line.product_id] = line.quantity
        return deltas

    def steps(self) -> Tuple[Any, ...]:
        """Every line that needs a write, merged across groups in product-id order."""
        return tuple(
            sorted((*self.removed, *self.changed, *self.added), key=_by_product)
        )


def _by_product(line: Any) -> str:
    # Fixed processing order gives concurrent transactions the same lock order.
    return str(line.product_id)


def plan_reconciliation(
    current: Mapping[UUID, CurrentLine], target: Mapping[UUID, int]
) -> ReconciliationPlan:
    """Diff the order's ``current`` lines against the ``target`` quantities.

    Both mappings are keyed by product id, so each product lands in
    exactly one of removed / retained / added.
    """
    removed = [line for pid, line in current.items() if pid not in target]
    retained = [
        RetainedLine(
            item_id=current[pid].item_id,
            product_id=pid,
            old_quantity=current[pid].quantity,
            new_quantity=quantity,
        )
        for pid, quantity in target.items()
        if pid in current
    ]
    added = [
        NewLine(product_id=pid, quantity=quantity)
        for pid, quantity in target.items()
        if pid not in current
    ]
    return ReconciliationPlan(
        removed=tuple(sorted(removed, key=_by_product)),
        retained=tuple(sorted(retained, key=_by_product)),
        added=tuple(sorted(added, key=_by_product)),
    )


# ---------------------------------------------------------------------------
# Apply
# ---------------------------------------------------------------------------


class OrderReconciler:
    """Applies reconciliation plans to an order and to product stock.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
        oversell_policy: str = OversellPolicy.REJECT,
    ) -> None:
        self._order_repo = order_repository
        self._product_repo = product_repository
        self._allow_negative = oversell_policy == OversellPolicy.ALLOW

    def reconcile(self, order: Order, target: Mapping[UUID, int]) -> ReconciliationPlan:
        """Bring ``order``'s lines to ``target`` (product id -> quantity).

        Raises:
            ProductNotFound: a requested product does not exist.
            InsufficientStock: stock would go negative under ``reject``.
            ReconciliationError: a line or stock row vanished mid-way.
        """
        current = {
            item.product_id: CurrentLine(
                item_id=item.id, product_id=item.product_id, quantity=item.quantity
            )
            for item in order.items.all()
        }
        plan = plan_reconciliation(current, target)
        log = logger.bind(order_id=str(order.id))

        products = self._load_products(plan)

        # One pass over all products, in id order, whatever group they fall in.
        for line in plan.steps():
            if isinstance(line, CurrentLine):
                self._give_back(line.product_id, line.quantity)
                self._expect_row(
                    self._order_repo.delete_item(line.item_id), "delete line", line.item_id
                )
            elif isinstance(line, RetainedLine):
                if line.delta > 0:
                    self._take(line.product_id, line.delta)
                else:
                    self._give_back(line.product_id, -line.delta)
                self._expect_row(
                    self._order_repo.update_item_quantity(line.item_id, line.new_quantity),
                    "update line",
                    line.item_id,
                )
            else:
                self._take(line.product_id, line.quantity)
                self._order_repo.add_item(
                    order_id=order.id,
                    product_id=line.product_id,
                    quantity=line.quantity,
                    price=products[line.product_id].price,
                )

        log.info(
            "order.reconciled",
            removed=len(plan.removed),
            changed=len(plan.changed),
            added=len(plan.added),
        )
        return plan

    def release_all(self, order: Order) -> ReconciliationPlan:
        """Give every line's quantity back to stock and delete the lines."""
        return self.reconcile(order, {})

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _load_products(self, plan: ReconciliationPlan) -> Dict[UUID, Product]:
        wanted = plan.target_product_ids
        if not wanted:
            return {}
        products = self._product_repo.get_many(wanted)
        missing = set(wanted) - set(products)
        if missing:
            raise ProductNotFound(missing)
        return products

    def _take(self, product_id: UUID, quantity: int) -> None:
        updated = self._product_repo.decrement_stock(
            product_id, quantity, allow_negative=self._allow_negative
        )
        if updated:
            return
        product = self._product_repo.get_by_id(str(product_id))
        if product is None:
            raise ProductNotFound([product_id])
        raise InsufficientStock(
            product_id, requested=quantity, available=product.stock_quantity
        )

    def _give_back(self, product_id: UUID, quantity: int) -> None:
        self._expect_row(
            self._product_repo.increment_stock(product_id, quantity),
            "restock product",
            product_id,
        )

    @staticmethod
    def _expect_row(rows: int, action: str, key: Any) -> None:
        if not rows:
            raise ReconciliationError(f"Could not {action} {key}: row not found.")
