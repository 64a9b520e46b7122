"""Identity service: register, login, authenticate.

All DB operations use the injected AsyncSession. Transactions are managed
by the caller (router layer) via `async with db.begin()`.
"""

import logging
import uuid

from sqlalchemy import select, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.sb_common.enums import TransactionType, UserRole
from src.sb_common.errors import (
    EmailExistsError,
    InvalidCredentialsError,
    UnauthenticatedError,
    UsernameExistsError,
)
from src.sb_gateway.auth.jwt_handler import create_access_token, decode_token
from src.sb_gateway.auth.password import hash_password, verify_password
from src.sb_gateway.user.db_models import UserModel

logger = logging.getLogger("sb.identity")

_OPENING_GRANT_SQL = text("""
    INSERT INTO transactions
        (user_id, type, amount, description, balance_before, balance_after)
    VALUES
        (:user_id, :type, :amount, :description, 0, :amount)
""")


class UserService:
    """Stateless service — instantiate once, reuse across requests."""

    def __init__(self, initial_balance_cents: int | None = None) -> None:
        self._initial_balance = (
            settings.INITIAL_BALANCE_CENTS
            if initial_balance_cents is None
            else initial_balance_cents
        )

    async def register(
        self,
        email: str,
        username: str,
        password: str,
        first_name: str,
        last_name: str,
        db: AsyncSession,
    ) -> tuple[UserModel, str]:
        """Create a user with the opening balance grant and return (user, token).

        The user row and its opening ``deposit`` ledger row are written together;
        the caller must wrap this in `async with db.begin()`.
        """
        result = await db.execute(select(UserModel).where(UserModel.email == email))
        if result.scalar_one_or_none() is not None:
            raise EmailExistsError()

        result = await db.execute(select(UserModel).where(UserModel.username == username))
        if result.scalar_one_or_none() is not None:
            raise UsernameExistsError()

        user = UserModel(
            email=email,
            username=username,
            password_hash=hash_password(password),
            first_name=first_name,
            last_name=last_name,
            balance=self._initial_balance,
            role=UserRole.USER.value,
            is_active=True,
        )
        db.add(user)
        try:
            await db.flush()  # Get user.id without committing
        except IntegrityError as exc:
            # Lost a race against a concurrent registration; DB UNIQUE is the final guard
            if "uq_users_username" in str(exc.orig):
                raise UsernameExistsError() from None
            raise EmailExistsError() from None

        if self._initial_balance > 0:
            await db.execute(
                _OPENING_GRANT_SQL,
                {
                    "user_id": user.id,
                    "type": TransactionType.DEPOSIT.value,
                    "amount": self._initial_balance,
                    "description": "Welcome balance",
                },
            )

        logger.info("Registered user %s (%s)", user.id, username)
        return user, create_access_token(str(user.id))

    async def login(
        self,
        email: str,
        password: str,
        db: AsyncSession,
    ) -> tuple[UserModel, str]:
        """Authenticate by email + password and return (user, token).

        Unknown email, inactive account and wrong password all raise the same
        InvalidCredentialsError so callers cannot tell which check failed.
        """
        result = await db.execute(
            select(UserModel).where(UserModel.email == email, UserModel.is_active.is_(True))
        )
        user = result.scalar_one_or_none()

        if user is None or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()

        return user, create_access_token(str(user.id))

    async def authenticate(self, token: str | None, db: AsyncSession) -> UserModel:
        """Resolve a bearer token to an active user or raise UnauthenticatedError."""
        if not token:
            raise UnauthenticatedError("Access token required")

        subject = decode_token(token)
        try:
            user_id = uuid.UUID(subject)
        except ValueError:
            raise UnauthenticatedError() from None

        result = await db.execute(select(UserModel).where(UserModel.id == user_id))
        user = result.scalar_one_or_none()
        if user is None or not user.is_active:
            raise UnauthenticatedError()
        return user
