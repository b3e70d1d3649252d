"""Order domain exceptions.

Raised by the Service Layer when an order status change is refused.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations


class OrderNotFound(Exception):
    """The requested order does not exist (or the id is malformed)."""


class OrderAccessDenied(Exception):
    """The caller has no relation to the order and no admin grant."""


class InvalidStatusTransition(Exception):
    """The caller's effective role may not make this transition from the
    order's current status."""

    def __init__(self, current_status: str, requested_status: str, role: str) -> None:
        self.current_status = current_status
        self.requested_status = requested_status
        self.role = role
        super().__init__(
            f"Status transition from '{current_status}' to "
            f"'{requested_status}' not allowed for {role}"
        )


class OrderStatusConflict(Exception):
    """The order changed between read and write; the caller may retry."""


class OrderStoreUnavailable(Exception):
    """A data-store read or write failed."""
