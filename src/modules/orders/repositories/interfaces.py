"""Order repository interface.

Extends ``IRepository[Order]`` with what the status service needs:
a compare-and-swap status write and the append-only history trail.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderStatusHistory


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root."""

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with prefetched status history.

        Returns ``None`` for unknown or malformed ids.
        """

    @abstractmethod
    def conditional_update(
        self,
        order_id: Any,
        expected_status: str,
        new_status: str,
        timestamp: datetime,
    ) -> bool:
        """Set ``status`` and ``updated_at`` only if the row is still at
        *expected_status*.  Returns ``False`` when nothing matched."""

    @abstractmethod
    def add_history(
        self,
        order_id: Any,
        old_status: str,
        new_status: str,
        user_id: Any,
        role: str,
    ) -> OrderStatusHistory:
        """Record a status change in the order's audit trail."""
