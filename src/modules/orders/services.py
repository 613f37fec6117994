"""Order service layer (Use Cases).

Orchestrates the order operations on top of the repositories and the
``OrderReconciler``.  Every operation returns a ``ServiceResult``:

- create / update-items / delete run inside one ``transaction.atomic()``
  block.  Line-item writes and stock adjustments commit together, and the
  block is rolled back whenever the result carries an error.
- list / get / update-status are single statements and need no explicit
  unit of work.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, List, Optional

import structlog
from django.conf import settings
from django.db import DatabaseError, IntegrityError, transaction

from modules.core.results import ErrorKind, ServiceError, ServiceResult
from modules.orders.exceptions import OrderDomainError, OrderNotFound
from modules.orders.reconciler import OrderReconciler

if TYPE_CHECKING:
    from modules.orders.dtos import (
        OrderItemsDTO,
        OrderListFilterDTO,
        UpdateOrderStatusDTO,
    )
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives repositories via constructor injection (DIP).  The oversell
    policy defaults to ``settings.ORDERS_OVERSELL_POLICY``.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
        oversell_policy: Optional[str] = None,
    ) -> None:
        self._order_repo = order_repository
        self._reconciler = OrderReconciler(
            order_repository,
            product_repository,
            oversell_policy or settings.ORDERS_OVERSELL_POLICY,
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_order(self, dto: OrderItemsDTO) -> ServiceResult[Order]:
        """Create a ``pending`` order holding ``dto.items``, taking their stock."""

        def operation() -> ServiceResult[Order]:
            order = self._order_repo.create()
            self._reconciler.reconcile(order, dto.as_target())
            logger.info(
                "order.created", order_id=str(order.id), item_count=len(dto.items)
            )
            return ServiceResult.success(self._order_repo.get_by_id(str(order.id)))

        return self._in_transaction("create_order", operation)

    def update_items(self, order_id: str, dto: OrderItemsDTO) -> ServiceResult[Order]:
        """Replace the order's line items with ``dto.items``.

        Stock moves only by the difference between the current and the
        requested quantities, so repeating the same request is a no-op.
        """

        def operation() -> ServiceResult[Order]:
            order = self._require_order(order_id)
            plan = self._reconciler.reconcile(order, dto.as_target())
            logger.info("order.items_updated", order_id=order_id, noop=plan.is_noop)
            return ServiceResult.success(self._order_repo.get_by_id(order_id))

        return self._in_transaction("update_items", operation)

    def update_status(
        self, order_id: str, dto: UpdateOrderStatusDTO
    ) -> ServiceResult[Order]:
        """Set the order's status.  Lines and stock are untouched."""
        if not self._order_repo.update_status(order_id, dto.status):
            return ServiceResult.failure(OrderNotFound(order_id).to_error())
        logger.info("order.status_updated", order_id=order_id, status=dto.status)
        return ServiceResult.success(self._order_repo.get_by_id(order_id))

    def delete_order(self, order_id: str) -> ServiceResult[None]:
        """Give every line's stock back, then delete the order.

        Stock is restored whatever the order's status.
        """

        def operation() -> ServiceResult[None]:
            order = self._require_order(order_id)
            self._reconciler.release_all(order)
            self._order_repo.delete(order_id)
            logger.info("order.deleted", order_id=order_id)
            return ServiceResult.success()

        return self._in_transaction("delete_order", operation)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str) -> ServiceResult[Order]:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            return ServiceResult.failure(OrderNotFound(order_id).to_error())
        return ServiceResult.success(order)

    def list_orders(self, filters: OrderListFilterDTO) -> ServiceResult[List[Order]]:
        """Return orders, newest first, optionally only those in ``filters.status``."""
        return ServiceResult.success(self._order_repo.list(status=filters.status))

    # ------------------------------------------------------------------
    # Unit of work
    # ------------------------------------------------------------------

    def _require_order(self, order_id: str) -> Order:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise OrderNotFound(order_id)
        return order

    def _in_transaction(
        self, name: str, operation: Callable[[], ServiceResult]
    ) -> ServiceResult:
        """Run ``operation`` atomically, converting domain failures to results.

        The transaction is committed only when the result is a success.
        Database errors become reconciliation errors; any other exception
        propagates (and rolls back).
        """
        log = logger.bind(operation=name)
        with transaction.atomic():
            try:
                result = operation()
            except OrderDomainError as exc:
                result = ServiceResult.failure(exc.to_error())
            except IntegrityError as exc:
                result = ServiceResult.failure(
                    ServiceError(
                        kind=ErrorKind.RECONCILIATION,
                        detail=f"Order update violated a data constraint: {exc}",
                        code="constraint_violation",
                    )
                )
            except DatabaseError as exc:
                result = ServiceResult.failure(
                    ServiceError(
                        kind=ErrorKind.RECONCILIATION,
                        detail=f"Order update was refused by the database: {exc}",
                        code="database_error",
                    )
                )
            if not result.ok:
                transaction.set_rollback(True)
                log.warning(
                    "order.operation_rolled_back",
                    kind=result.error.kind.value,
                    code=result.error.code,
                    detail=result.error.detail,
                )
        return result
