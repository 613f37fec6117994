"""Order API views.

Exposes ``OrderService`` over HTTP with a DRF ViewSet.  Request bodies
are validated by serializers (422 via the project exception handler)
before any service call; failed ``ServiceResult``s are rendered by
``error_response``.  Successful payloads are wrapped as ``{"data": ...}``.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.exceptions import error_response
from modules.orders.dtos import (
    OrderItemDTO,
    OrderItemsDTO,
    OrderListFilterDTO,
    UpdateOrderStatusDTO,
)
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    OrderItemsInputSerializer,
    OrderListQuerySerializer,
    OrderSerializer,
    OrderStatusInputSerializer,
)
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository


def _items_dto(request: Request) -> OrderItemsDTO:
    serializer = OrderItemsInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    return OrderItemsDTO(
        items=[
            OrderItemDTO(product_id=item["product_id"], quantity=item["quantity"])
            for item in serializer.validated_data["items"]
        ]
    )


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer.
    """

    queryset = Order.objects.all()
    serializer_class = OrderSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )

    def _order_response(self, result) -> Response:
        if not result.ok:
            return error_response(result.error)
        return Response({"data": OrderSerializer(result.value).data})

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/?status=pending"""
        query = OrderListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        result = self._service.list_orders(
            OrderListFilterDTO(status=query.validated_data.get("status"))
        )
        if not result.ok:
            return error_response(result.error)
        return Response({"data": OrderSerializer(result.value, many=True).data})

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        return self._order_response(self._service.get_order(pk))

    # ------------------------------------------------------------------
    # Create / Update items
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/  {"items": [{"product_id", "quantity"}]}"""
        return self._order_response(self._service.create_order(_items_dto(request)))

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/orders/{pk}/

        Replaces the order's item set; stock moves by quantity deltas only.
        """
        dto = _items_dto(request)
        return self._order_response(self._service.update_items(pk, dto))

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    @action(detail=True, methods=["patch"], url_path="status")
    def set_status(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/orders/{pk}/status/"""
        serializer = OrderStatusInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        dto = UpdateOrderStatusDTO(status=serializer.validated_data["status"])
        return self._order_response(self._service.update_status(pk, dto))

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/orders/{pk}/ (stock of every line is restored)"""
        result = self._service.delete_order(pk)
        if not result.ok:
            return error_response(result.error)
        return Response(
            {"message": "Order deleted successfully."}, status=status.HTTP_200_OK
        )
