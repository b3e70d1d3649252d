"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.models import Order, OrderStatusHistory

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class UpdateOrderStatusSerializer(serializers.Serializer):
    """Validates the ``{orderId, newStatus}`` status-change payload."""

    orderId = serializers.CharField(trim_whitespace=True)  # noqa: N815
    newStatus = serializers.CharField(trim_whitespace=True)  # noqa: N815


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class StatusHistorySerializer(serializers.ModelSerializer):
    """Read serializer for order status history records."""

    class Meta:
        model = OrderStatusHistory
        fields = [
            "id",
            "old_status",
            "new_status",
            "user_id",
            "role",
            "created_at",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for an order, its history and the caller's role.

    The effective role is passed in through ``context["role"]``.
    """

    status_label = serializers.CharField(source="get_status_display", read_only=True)
    role = serializers.SerializerMethodField()
    status_history = StatusHistorySerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "status",
            "status_label",
            "consumer_id",
            "vendor_id",
            "shopper_id",
            "total",
            "created_at",
            "updated_at",
            "role",
            "status_history",
        ]
        read_only_fields = fields

    def get_role(self, obj: Order) -> str | None:
        role = self.context.get("role")
        return role.value if role is not None else None
