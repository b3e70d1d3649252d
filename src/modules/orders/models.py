"""Order and OrderStatusHistory models.

Business rules implemented:
- Status transitions are role-aware and validated at the service layer
  against ``transitions.ROLE_STATUS_TRANSITIONS``.
- Every accepted transition writes one history record (old/new status,
  acting user, effective role, timestamp) in the same transaction.
- ``vendor`` / ``shopper`` reference profiles, ``consumer`` references the
  user directly; ``shopper`` stays empty until a delivery worker is matched.
- Orders are never deleted by this subsystem (PROTECT on every owner FK).
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from django.conf import settings
from django.db import models

from modules.accounts.constants import Role
from modules.core.models import BaseModel
from modules.orders.constants import OrderStatus
from modules.orders.transitions import allowed_next, is_allowed


class Order(BaseModel):
    """A marketplace order.

    ``status`` is only ever changed through ``OrderStatusService``, which
    writes it with a compare-and-swap on the previously-read value.
    ``total`` is fixed at creation and only read by the payment path.
    """

    consumer: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="orders",
    )
    vendor: models.ForeignKey = models.ForeignKey(
        "accounts.VendorProfile",
        on_delete=models.PROTECT,
        related_name="orders",
    )
    shopper: models.ForeignKey = models.ForeignKey(
        "accounts.ShopperProfile",
        on_delete=models.PROTECT,
        related_name="orders",
        null=True,
        blank=True,
    )
    status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    total: models.DecimalField = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
    )

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
        ]

    # ------------------------------------------------------------------
    # State Machine helpers
    # ------------------------------------------------------------------

    def allowed_next_for(self, role: Any) -> frozenset[str]:
        """Statuses *role* may move this order into from its current status."""
        return allowed_next(role, self.status)

    def can_transition_to(self, new_status: str, role: Any) -> bool:
        """Check whether *role* may move this order to *new_status*."""
        return is_allowed(role, self.status, new_status)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.id} ({self.status})"


class OrderStatusHistory(BaseModel):
    """Append-only audit trail for order status transitions.

    ``user`` is nullable so the record survives the acting account being
    removed.  ``role`` is the effective role the transition was authorised
    under, which may differ from the user's grants (e.g. an admin acting
    on their own shop's order is recorded as ``admin``).
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="status_history",
    )
    old_status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
    )
    new_status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
    )
    user: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
    )
    role: models.CharField = models.CharField(
        max_length=20,
        choices=Role.choices,
    )

    class Meta:
        db_table = "order_status_history"
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["order", "-created_at"],
                name="osh_order_created_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.order_id} : {self.old_status} -> {self.new_status}"
