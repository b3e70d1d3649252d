"""Order domain constants.

Defines the order status choices and the effective roles a caller can
act under.  The per-role transition table lives in ``transitions``.
"""

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    ACCEPTED = "accepted", "Accepted"
    PREPARING = "preparing", "Preparing"
    READY = "ready", "Ready"
    PICKED_UP = "picked_up", "Picked Up"
    INSPECTING = "inspecting", "Inspecting"
    APPROVED = "approved", "Approved"
    COMPLETED = "completed", "Completed"
    DISPUTED = "disputed", "Disputed"
    CANCELLED = "cancelled", "Cancelled"


class EffectiveRole(models.TextChoices):
    """Role a caller acts under for one specific order.

    Derived per request, never stored on the order.  ``NO_ACCESS`` means
    the caller has no relation to the order and no admin grant.
    """

    ADMIN = "admin", "Admin"
    VENDOR = "vendor", "Vendor"
    SHOPPER = "shopper", "Shopper"
    CONSUMER = "consumer", "Consumer"
    NO_ACCESS = "no_access", "No access"


# Terminal for consumer, vendor and shopper.  Only CANCELLED is terminal
# for admin as well.
TERMINAL_STATES: frozenset[str] = frozenset(
    {OrderStatus.COMPLETED.value, OrderStatus.DISPUTED.value, OrderStatus.CANCELLED.value}
)
