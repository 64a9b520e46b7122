"""Session token creation and verification.

One token type only: a signed HS256 access token bound to the user id,
valid for JWT_EXPIRE_MINUTES (24h) from issuance. There is no refresh flow;
an expired session requires a new login. Logout is client-side (discard the token).
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from config.settings import settings
from src.sb_common.errors import UnauthenticatedError

_ALGORITHM = settings.JWT_ALGORITHM  # "HS256"
_ACCESS_EXPIRE = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
_TOKEN_TYPE = "access"


def token_lifetime_seconds() -> int:
    return int(_ACCESS_EXPIRE.total_seconds())


def create_access_token(user_id: str) -> str:
    """Issue a session token for ``user_id``."""
    now = datetime.now(UTC)
    payload = {
        "sub": user_id,
        "type": _TOKEN_TYPE,
        "iat": now,
        "exp": now + _ACCESS_EXPIRE,
    }
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=_ALGORITHM))


def decode_token(token: str) -> str:
    """Verify signature, expiry and token type; return the subject (user id).

    Raises:
        UnauthenticatedError: token malformed, tampered, expired, or missing ``sub``.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise UnauthenticatedError() from None

    if payload.get("type") != _TOKEN_TYPE:
        raise UnauthenticatedError()
    subject = payload.get("sub")
    if not subject:
        raise UnauthenticatedError()
    return str(subject)
