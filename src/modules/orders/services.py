"""Order status service layer (Use Cases).

Orchestrates a status change: load the order, resolve the caller's
effective role, check the role's transition table, then write the new
status with a compare-and-swap on the status that was read.  The status
write and its history record share one transaction.

Authentication happens before this layer (DRF ``JWTAuthentication``); the
service receives the verified caller id.

Failures are raised as domain exceptions (see ``exceptions``).  Data-store
errors are wrapped in ``OrderStoreUnavailable``.  Nothing is retried here:
on ``OrderStatusConflict`` the client decides whether to re-read and retry.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Iterator, Tuple

import structlog
from django.db import DatabaseError, transaction
from django.utils import timezone

from modules.orders.constants import EffectiveRole
from modules.orders.dtos import (
    AvailableTransitionsDTO,
    StatusTransitionResultDTO,
    UpdateOrderStatusDTO,
)
from modules.orders.exceptions import (
    InvalidStatusTransition,
    OrderAccessDenied,
    OrderNotFound,
    OrderStatusConflict,
    OrderStoreUnavailable,
)
from modules.orders.transitions import allowed_next, is_allowed, ordered

if TYPE_CHECKING:
    from modules.orders.access import RoleResolver
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except DatabaseError as exc:
        logger.error("order.store_error", operation=operation, error=str(exc))
        raise OrderStoreUnavailable(f"Order store failed during {operation}.") from exc


class OrderStatusService:
    """Application service for order status use-cases.

    Receives the order repository and the role resolver via constructor
    injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        role_resolver: RoleResolver,
    ) -> None:
        self._order_repo = order_repository
        self._resolver = role_resolver

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def update_status(
        self, caller_id: Any, dto: UpdateOrderStatusDTO
    ) -> StatusTransitionResultDTO:
        """Move an order to ``dto.new_status`` on behalf of *caller_id*.

        Raises:
            OrderNotFound: order does not exist.
            OrderAccessDenied: caller has no effective role on the order.
            InvalidStatusTransition: role may not make this transition
                from the current status.
            OrderStatusConflict: the order's status changed after it was
                read.
            OrderStoreUnavailable: a data-store read or write failed.
        """
        order, role = self._load_authorized(caller_id, dto.order_id)
        previous_status = order.status

        log = logger.bind(
            order_id=str(order.id),
            role=role.value,
            current_status=previous_status,
            new_status=dto.new_status,
        )

        if not is_allowed(role, previous_status, dto.new_status):
            log.warning("order.invalid_transition")
            raise InvalidStatusTransition(previous_status, dto.new_status, role.value)

        with _store_errors("status update"):
            updated = self._order_repo.conditional_update(
                order.id,
                expected_status=previous_status,
                new_status=dto.new_status,
                timestamp=timezone.now(),
            )
            if not updated:
                log.warning("order.status_conflict")
                raise OrderStatusConflict(
                    f"Order {order.id} is no longer '{previous_status}'."
                )
            self._order_repo.add_history(
                order_id=order.id,
                old_status=previous_status,
                new_status=dto.new_status,
                user_id=caller_id,
                role=role.value,
            )

        log.info("order.status_updated")
        return StatusTransitionResultDTO(
            order_id=order.id,
            previous_status=previous_status,
            new_status=dto.new_status,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, caller_id: Any, order_id: str) -> Tuple[Order, EffectiveRole]:
        """Return the order together with the caller's effective role on it.

        Raises:
            OrderNotFound: order does not exist.
            OrderAccessDenied: caller has no effective role on the order.
            OrderStoreUnavailable: a data-store read failed.
        """
        return self._load_authorized(caller_id, order_id)

    def available_transitions(
        self, caller_id: Any, order_id: str
    ) -> AvailableTransitionsDTO:
        """List the statuses the caller may move the order into right now."""
        order, role = self._load_authorized(caller_id, order_id)
        return AvailableTransitionsDTO(
            order_id=order.id,
            status=order.status,
            role=role.value,
            allowed_statuses=ordered(allowed_next(role, order.status)),
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _load_authorized(
        self, caller_id: Any, order_id: str
    ) -> Tuple[Order, EffectiveRole]:
        with _store_errors("order lookup"):
            order = self._order_repo.get_by_id(order_id)
        if order is None:
            logger.info("order.not_found", order_id=str(order_id))
            raise OrderNotFound(f"Order {order_id} not found.")

        with _store_errors("role resolution"):
            role = self._resolver.resolve(caller_id, order)
        if role == EffectiveRole.NO_ACCESS:
            logger.warning(
                "order.access_denied",
                order_id=str(order.id),
                caller_id=str(caller_id),
            )
            raise OrderAccessDenied(f"Caller {caller_id} has no access to order {order.id}.")
        return order, role
