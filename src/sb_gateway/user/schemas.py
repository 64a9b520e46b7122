"""Pydantic request/response schemas for sb_gateway.

All responses are wrapped in ApiResponse at the router layer.
"""

import re

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.sb_common.cents import cents_to_display
from src.sb_gateway.user.db_models import UserModel


class RegisterRequest(BaseModel):
    email: EmailStr
    username: str = Field(..., min_length=3, max_length=30, pattern=r"^[a-zA-Z0-9_]+$")
    password: str = Field(..., min_length=8, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("password")
    @classmethod
    def password_complexity(cls, v: str) -> str:
        """Enforce: at least one letter and one digit."""
        if not re.search(r"[A-Za-z]", v):
            raise ValueError("Password must contain at least one letter")
        if not re.search(r"\d", v):
            raise ValueError("Password must contain at least one digit")
        return v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class UserInfo(BaseModel):
    """Public view of a user, embedded in auth responses and /auth/me."""

    user_id: str
    email: str
    username: str
    first_name: str
    last_name: str
    balance_cents: int
    balance_display: str
    role: str
    created_at: str | None

    @classmethod
    def from_model(cls, user: UserModel) -> "UserInfo":
        return cls(
            user_id=str(user.id),
            email=user.email,
            username=user.username,
            first_name=user.first_name,
            last_name=user.last_name,
            balance_cents=user.balance,
            balance_display=cents_to_display(user.balance),
            role=user.role,
            created_at=user.created_at.isoformat() if user.created_at else None,
        )


class AuthResponse(BaseModel):
    user: UserInfo
    token: str
    token_type: str = "Bearer"
    expires_in: int
