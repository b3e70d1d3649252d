"""Order API views.

Exposes the ``OrderStatusService`` via HTTP using a DRF ViewSet.
Domain exceptions are caught and translated into HTTP status codes with
a ``{"error": ...}`` body.  Anything else reaches the project exception
handler, which answers with a generic 500.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.accounts.repositories import (
    ProfileDjangoRepository,
    RoleGrantDjangoRepository,
)
from modules.core.exceptions import error_response
from modules.orders.access import RoleResolver
from modules.orders.dtos import UpdateOrderStatusDTO
from modules.orders.exceptions import (
    InvalidStatusTransition,
    OrderAccessDenied,
    OrderNotFound,
    OrderStatusConflict,
    OrderStoreUnavailable,
)
from modules.orders.models import Order
from modules.orders.repositories import OrderDjangoRepository
from modules.orders.serializers import OrderSerializer, UpdateOrderStatusSerializer
from modules.orders.services import OrderStatusService

ORDER_NOT_FOUND = "Order not found"
ACCESS_DENIED = "Access denied to this order"
MISSING_FIELDS = "Missing orderId or newStatus"
STATUS_CONFLICT = "Order status changed concurrently; reload and retry"


class OrderViewSet(GenericViewSet):
    """ViewSet for order status operations.

    Uses ``OrderStatusService`` with injected repositories (DIP).
    All ORM access goes through the service/repository layer.
    """

    queryset = Order.objects.all()
    serializer_class = OrderSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderStatusService(
            order_repository=OrderDjangoRepository(),
            role_resolver=RoleResolver(
                role_grant_repository=RoleGrantDjangoRepository(),
                profile_repository=ProfileDjangoRepository(),
            ),
        )

    def get_throttles(self) -> list[BaseThrottle]:
        """Scope throttling per action."""
        throttle_scope: str | None
        if self.action == "update_status":
            throttle_scope = "order_status_update"
        elif self.action in {"retrieve", "transitions"}:
            throttle_scope = "order_read"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    # ------------------------------------------------------------------
    # Status Update
    # ------------------------------------------------------------------

    @action(detail=False, methods=["post"], url_path="update-status")
    def update_status(self, request: Request) -> Response:
        """POST /api/v1/orders/update-status/

        Body: ``{"orderId": ..., "newStatus": ...}``.  403 covers both
        "no access to this order" and "transition not allowed"; the
        ``error`` text tells them apart.
        """
        serializer = UpdateOrderStatusSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response(MISSING_FIELDS, status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        dto = UpdateOrderStatusDTO(order_id=data["orderId"], new_status=data["newStatus"])

        try:
            result = self._service.update_status(request.user.pk, dto)
        except OrderNotFound:
            return error_response(ORDER_NOT_FOUND, status.HTTP_404_NOT_FOUND)
        except OrderAccessDenied:
            return error_response(ACCESS_DENIED, status.HTTP_403_FORBIDDEN)
        except InvalidStatusTransition as exc:
            return error_response(str(exc), status.HTTP_403_FORBIDDEN)
        except OrderStatusConflict:
            return error_response(STATUS_CONFLICT, status.HTTP_409_CONFLICT)
        except OrderStoreUnavailable:
            return error_response(
                "Failed to update order status",
                status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        return Response(result.to_response(), status=status.HTTP_200_OK)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        try:
            order, role = self._service.get_order(request.user.pk, str(pk))
        except OrderNotFound:
            return error_response(ORDER_NOT_FOUND, status.HTTP_404_NOT_FOUND)
        except OrderAccessDenied:
            return error_response(ACCESS_DENIED, status.HTTP_403_FORBIDDEN)
        except OrderStoreUnavailable:
            return error_response(
                "Failed to load order", status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        serializer = OrderSerializer(order, context={"role": role})
        return Response(serializer.data)

    @action(detail=True, methods=["get"])
    def transitions(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/transitions/

        Lists the statuses the caller may move this order into, so UI
        surfaces do not hard-code the transition table.
        """
        try:
            result = self._service.available_transitions(request.user.pk, str(pk))
        except OrderNotFound:
            return error_response(ORDER_NOT_FOUND, status.HTTP_404_NOT_FOUND)
        except OrderAccessDenied:
            return error_response(ACCESS_DENIED, status.HTTP_403_FORBIDDEN)
        except OrderStoreUnavailable:
            return error_response(
                "Failed to load order", status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        return Response(result.to_response())
