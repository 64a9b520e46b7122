"""Role-based authorization.

Roles are ranked; a user satisfies a requirement when their rank is at least
the required rank. Routers never compare ``user.role`` themselves — they depend
on ``require_role(...)``.
"""

from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends

from src.sb_common.enums import UserRole
from src.sb_common.errors import ForbiddenError
from src.sb_gateway.auth.dependencies import get_current_user
from src.sb_gateway.user.db_models import UserModel

_ROLE_RANK: dict[UserRole, int] = {
    UserRole.USER: 0,
    UserRole.ADMIN: 10,
}


def authorize(user: UserModel, required_role: UserRole) -> None:
    """Raise ForbiddenError unless ``user`` holds at least ``required_role``."""
    try:
        rank = _ROLE_RANK[UserRole(user.role)]
    except ValueError:
        rank = -1  # unknown role in the DB grants nothing
    if rank < _ROLE_RANK[required_role]:
        raise ForbiddenError(required_role.value)


def require_role(required_role: UserRole) -> Callable[..., Awaitable[UserModel]]:
    """Dependency factory: authenticated user holding ``required_role``."""

    async def _dependency(
        current_user: Annotated[UserModel, Depends(get_current_user)],
    ) -> UserModel:
        authorize(current_user, required_role)
        return current_user

    return _dependency


require_admin = require_role(UserRole.ADMIN)
