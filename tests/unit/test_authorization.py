"""Unit tests for role-based authorization."""

import uuid

import pytest

from src.sb_common.enums import UserRole
from src.sb_common.errors import ForbiddenError
from src.sb_gateway.auth.authorization import authorize, require_admin, require_role
from src.sb_gateway.user.db_models import UserModel


def _user(role: str) -> UserModel:
    user = UserModel()
    user.id = uuid.uuid4()
    user.role = role
    user.is_active = True
    return user


def test_admin_satisfies_admin() -> None:
    authorize(_user("admin"), UserRole.ADMIN)


def test_admin_satisfies_user() -> None:
    authorize(_user("admin"), UserRole.USER)


def test_user_lacks_admin() -> None:
    with pytest.raises(ForbiddenError):
        authorize(_user("user"), UserRole.ADMIN)


def test_unknown_role_grants_nothing() -> None:
    with pytest.raises(ForbiddenError):
        authorize(_user("superuser"), UserRole.USER)


async def test_require_admin_dependency_rejects_user() -> None:
    with pytest.raises(ForbiddenError):
        await require_admin(current_user=_user("user"))


async def test_require_role_dependency_returns_user() -> None:
    user = _user("user")
    assert await require_role(UserRole.USER)(current_user=user) is user
