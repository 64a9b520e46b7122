"""FastAPI dependency: get_current_user.

Usage in any protected router:
    from src.sb_gateway.auth.dependencies import get_current_user

    @router.get("/protected")
    async def protected(user: UserModel = Depends(get_current_user)):
        ...
"""

from typing import Annotated

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from src.sb_common.database import get_db_session
from src.sb_gateway.user.db_models import UserModel
from src.sb_gateway.user.service import UserService

# tokenUrl tells Swagger UI where to get a token (used for the "Authorize" button).
# auto_error=False so a missing header surfaces as our UNAUTHENTICATED envelope.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)

_service = UserService()


async def get_current_user(
    token: Annotated[str | None, Depends(oauth2_scheme)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> UserModel:
    """Extract and validate the Bearer token, return the active UserModel.

    Raises UnauthenticatedError (401) if the token is missing, malformed,
    expired, or references an inactive/nonexistent user.
    """
    return await _service.authenticate(token, db)
