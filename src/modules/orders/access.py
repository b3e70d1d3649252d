"""Effective-role resolution for a caller acting on an order.

Precedence, highest first: admin grant, vendor of this order, shopper of
this order, consumer of this order.  An admin who is also the order's
vendor acts as admin; a caller matching nothing gets ``NO_ACCESS``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, Optional, Protocol

import structlog

from modules.accounts.constants import Role
from modules.orders.constants import EffectiveRole

if TYPE_CHECKING:
    from modules.accounts.repositories.interfaces import (
        IProfileRepository,
        IRoleGrantRepository,
    )

logger = structlog.get_logger(__name__)


class OrderOwnership(Protocol):
    consumer_id: Any
    vendor_id: Any
    shopper_id: Any


def _same_id(left: Any, right: Any) -> bool:
    if left is None or right is None:
        return False
    return str(left) == str(right)


def resolve_effective_role(
    caller_id: Any,
    order: OrderOwnership,
    roles: Iterable[str],
    vendor_profile_id: Optional[Any] = None,
    shopper_profile_id: Optional[Any] = None,
) -> EffectiveRole:
    """Pure resolution from already-fetched grants and profile ids."""
    if Role.ADMIN.value in {str(r) for r in roles}:
        return EffectiveRole.ADMIN
    if _same_id(vendor_profile_id, order.vendor_id):
        return EffectiveRole.VENDOR
    if _same_id(shopper_profile_id, order.shopper_id):
        return EffectiveRole.SHOPPER
    if _same_id(caller_id, order.consumer_id):
        return EffectiveRole.CONSUMER
    return EffectiveRole.NO_ACCESS


class RoleResolver:
    """Fetches a caller's grants and profiles, then resolves their role.

    Repository failures are not caught here; they propagate to the
    service, which reports them as infrastructure errors.
    """

    def __init__(
        self,
        role_grant_repository: IRoleGrantRepository,
        profile_repository: IProfileRepository,
    ) -> None:
        self._grants = role_grant_repository
        self._profiles = profile_repository

    def resolve(self, caller_id: Any, order: OrderOwnership) -> EffectiveRole:
        roles = self._grants.list_roles(caller_id)
        # Admins skip the two profile queries.
        if Role.ADMIN.value in roles:
            role = EffectiveRole.ADMIN
        else:
            role = resolve_effective_role(
                caller_id,
                order,
                roles,
                vendor_profile_id=self._profiles.vendor_profile_id(caller_id),
                shopper_profile_id=self._profiles.shopper_profile_id(caller_id),
            )
        logger.debug(
            "order.role_resolved",
            caller_id=str(caller_id),
            role=role.value,
        )
        return role
