"""
Pydantic schemas for Auth endpoints.

Blank values are accepted here and rejected by the auth service, so that
"missing" and "blank" produce the same 400 response.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class UserRegisterRequest(BaseModel):
    """Request schema for user registration."""

    email: str = Field(..., max_length=255, description="Login email")
    password: str = Field(..., max_length=128, description="Password")
    name: str = Field(..., max_length=100, description="Display name")


class UserLoginRequest(BaseModel):
    """Request schema for user login."""

    email: str = Field(..., description="Login email")
    password: str = Field(..., description="Password")


class UserInfo(BaseModel):
    """Public user fields."""

    id: str
    name: str
    email: str
    created_at: datetime

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    """Response schema for successful registration or login."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Token expiration time in seconds")
    user: UserInfo
