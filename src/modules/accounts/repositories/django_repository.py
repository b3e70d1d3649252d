"""Django ORM implementations of the account repositories."""

from __future__ import annotations

from typing import Any, Optional
from uuid import UUID

import structlog

from modules.accounts.models import RoleGrant, ShopperProfile, VendorProfile
from modules.accounts.repositories.interfaces import (
    IProfileRepository,
    IRoleGrantRepository,
)

logger = structlog.get_logger(__name__)


class RoleGrantDjangoRepository(IRoleGrantRepository):
    """Role grants backed by the ``user_roles`` table."""

    def list_roles(self, user_id: Any) -> frozenset[str]:
        return frozenset(
            RoleGrant.objects.filter(user_id=user_id).values_list("role", flat=True)
        )

    def grant(self, user_id: Any, role: str) -> bool:
        _, created = RoleGrant.objects.get_or_create(user_id=user_id, role=role)
        if created:
            logger.info("account.role_granted", user_id=str(user_id), role=role)
        return created


class ProfileDjangoRepository(IProfileRepository):
    """Vendor and shopper profile look-ups keyed by owning user."""

    def vendor_profile_id(self, user_id: Any) -> Optional[UUID]:
        return (
            VendorProfile.objects.filter(user_id=user_id)
            .values_list("id", flat=True)
            .first()
        )

    def shopper_profile_id(self, user_id: Any) -> Optional[UUID]:
        return (
            ShopperProfile.objects.filter(user_id=user_id)
            .values_list("id", flat=True)
            .first()
        )
