"""Pydantic schemas for authentication endpoints."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class SignupRequest(BaseModel):
    """Request body for creating an account."""

    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=1, description="User's password")


class LoginRequest(BaseModel):
    """Request body for logging in."""

    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=1, description="User's password")


class RefreshRequest(BaseModel):
    """Request body for exchanging a refresh token."""

    refresh_token: str = Field(..., description="JWT refresh token")


class UserResponse(BaseModel):
    """User information in auth responses."""

    id: str = Field(..., description="User ID")
    email: str = Field(..., description="User's email address")
    is_active: bool = Field(..., description="Whether the user is active")
    created_at: datetime = Field(..., description="When the user was created")

    model_config = {"from_attributes": True}


class TokenResponse(BaseModel):
    """Access and refresh tokens."""

    token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="JWT refresh token")
    expires_in: int = Field(..., description="Access token expiration time in seconds")


class AuthResponse(TokenResponse):
    """Response for successful signup or login."""

    user: UserResponse = Field(..., description="User information")


class MeResponse(BaseModel):
    """The identity behind the current access token."""

    user_id: str
    email: str
    username: str | None = Field(None, description="Null until profile setup is done")
