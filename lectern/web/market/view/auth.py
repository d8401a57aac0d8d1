"""View models for authentication endpoints."""

from __future__ import annotations

import pydantic as p
from pydantic import EmailStr

from lectern.model import UserID, UserRole

from .user import UserResponse

Password = p.Field(min_length=8, max_length=72, description="bcrypt uses at most 72 bytes")


class RegisterRequest(p.BaseModel):
    """Request body for registration.

    Any role or state in the body is ignored; the endpoint decides both.
    """

    user_name: str = p.Field(min_length=1)
    user_email: EmailStr
    user_password: str = Password


class LoginRequest(p.BaseModel):
    """Request body for login."""

    user_email: EmailStr
    user_password: str = p.Field(min_length=1)


class RegisterResponse(p.BaseModel):
    message: str
    user: UserResponse
    token: str


class AdminRegisterResponse(p.BaseModel):
    message: str
    admin: UserResponse


class LoginUser(p.BaseModel):
    user_id: UserID
    user_role: UserRole


class LoginResponse(p.BaseModel):
    """Response for successful login."""

    message: str
    user: LoginUser
    token: str
