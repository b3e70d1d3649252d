"""RoleGrant, VendorProfile and ShopperProfile models.

Business rules implemented:
- A user may hold several global role grants at once.
- Grants have set semantics: ``(user, role)`` is unique.
- A user owns at most one vendor profile and at most one shopper profile.
  Orders reference these profiles (not the user) in ``vendor`` / ``shopper``.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from modules.accounts.constants import Role
from modules.core.models import BaseModel


class RoleGrant(BaseModel):
    """A global role granted to a user."""

    user: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="role_grants",
    )
    role: models.CharField = models.CharField(
        max_length=20,
        choices=Role.choices,
    )

    class Meta:
        db_table = "user_roles"
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "role"],
                name="user_roles_user_role_unique",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.user_id}: {self.role}"


class VendorProfile(BaseModel):
    """Shop run by a user.  ``Order.vendor`` points here."""

    user: models.OneToOneField = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="vendor_profile",
    )
    business_name: models.CharField = models.CharField(max_length=200)

    class Meta:
        db_table = "vendors"

    def __str__(self) -> str:
        return self.business_name


class ShopperProfile(BaseModel):
    """Delivery worker profile.  ``Order.shopper`` points here once matched."""

    user: models.OneToOneField = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="shopper_profile",
    )
    display_name: models.CharField = models.CharField(max_length=200)

    class Meta:
        db_table = "shoppers"

    def __str__(self) -> str:
        return self.display_name
