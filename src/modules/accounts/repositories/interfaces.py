"""Account repository interfaces.

The role resolver depends only on these contracts: it needs a caller's
global role grants and the ids of the vendor / shopper profiles the caller
owns, nothing else about the account.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional
from uuid import UUID


class IRoleGrantRepository(ABC):
    """Read/write access to ``(user, role)`` grants."""

    @abstractmethod
    def list_roles(self, user_id: Any) -> frozenset[str]:
        """Return every role label granted to *user_id* (empty if none)."""

    @abstractmethod
    def grant(self, user_id: Any, role: str) -> bool:
        """Grant *role* to *user_id*.  Returns ``False`` if already held."""


class IProfileRepository(ABC):
    """Look-ups from a user to the marketplace profiles they own."""

    @abstractmethod
    def vendor_profile_id(self, user_id: Any) -> Optional[UUID]:
        """Return the id of the user's vendor profile, or ``None``."""

    @abstractmethod
    def shopper_profile_id(self, user_id: Any) -> Optional[UUID]:
        """Return the id of the user's shopper profile, or ``None``."""
