"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.

Status writes use optimistic concurrency: a single
``UPDATE orders SET status = ... WHERE id = ... AND status = <expected>``.
If another request moved the order first, the ``WHERE`` clause no longer
matches and the affected-row count is zero.  No row lock is held between
the read and the write.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

import structlog
from django.core.exceptions import ValidationError

from modules.orders.models import Order, OrderStatusHistory
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        try:
            return (
                Order.objects.prefetch_related("status_history")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def conditional_update(
        self,
        order_id: Any,
        expected_status: str,
        new_status: str,
        timestamp: datetime,
    ) -> bool:
        rows = Order.objects.filter(id=order_id, status=expected_status).update(
            status=new_status,
            updated_at=timestamp,
        )
        logger.info(
            "order.conditional_update",
            order_id=str(order_id),
            expected_status=expected_status,
            new_status=new_status,
            matched=rows,
        )
        return rows == 1

    def add_history(
        self,
        order_id: Any,
        old_status: str,
        new_status: str,
        user_id: Any,
        role: str,
    ) -> OrderStatusHistory:
        history = OrderStatusHistory.objects.create(
            order_id=order_id,
            old_status=old_status,
            new_status=new_status,
            user_id=user_id,
            role=role,
        )
        logger.info(
            "order.history_added",
            order_id=str(order_id),
            old_status=old_status,
            new_status=new_status,
            role=role,
        )
        return history
