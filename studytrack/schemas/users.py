"""
Pydantic schemas for the user endpoints.

Response models double as presenters: controllers pass a stored record
through ``Model.model_validate`` and unknown keys (``password_hash``) are
dropped from the wire shape.
"""

from typing import Optional

from pydantic import BaseModel, EmailStr, Field


# ── Request models ────────────────────────────────────────────────────────────

class CreateUserRequest(BaseModel):
    """Request body for POST /user."""

    username: str = Field(..., min_length=3, max_length=50, examples=["ada_lovelace"])
    email: EmailStr = Field(..., examples=["ada@example.com"])
    # bcrypt only uses the first 72 bytes of a password
    password: str = Field(..., min_length=8, max_length=72, examples=["Sup3r-secret"])


class LoginRequest(BaseModel):
    """Request body for POST /user/login."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=72)


# ── Response models ───────────────────────────────────────────────────────────

class CreateUserResponse(BaseModel):
    id: str
    username: str
    email: str
    token: str


class LoginResponse(BaseModel):
    id: str
    token: str
    token_type: str = "bearer"
    expires_in: int  # seconds


class UserResponse(BaseModel):
    id: str
    username: str
    email: str
    created_at: Optional[str] = None
