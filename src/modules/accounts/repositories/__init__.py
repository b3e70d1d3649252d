"""Account repositories package."""

from modules.accounts.repositories.django_repository import (
    ProfileDjangoRepository,
    RoleGrantDjangoRepository,
)
from modules.accounts.repositories.interfaces import (
    IProfileRepository,
    IRoleGrantRepository,
)

__all__ = [
    "IProfileRepository",
    "IRoleGrantRepository",
    "ProfileDjangoRepository",
    "RoleGrantDjangoRepository",
]
