"""Registration and login routes."""

from __future__ import annotations

import pydantic as p
from fastapi import APIRouter, Depends, status

from lectern.auth import JWTManager, LocalAuthProvider
from lectern.core import di
from lectern.model import UserRole

from ..view import AdminRegisterResponse, LoginRequest, LoginResponse, LoginUser, RegisterRequest, RegisterResponse, \
    UserResponse

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/postUser", operation_id="register_user", status_code=status.HTTP_201_CREATED)
@di.inject
async def register_user(
    request: RegisterRequest,
    provider: LocalAuthProvider = Depends(di.Provide["auth.local"]),
    jwt_manager: JWTManager = Depends(di.Provide["auth.jwt_manager"]),
) -> RegisterResponse:
    """Register a normal user and sign them in."""
    user = await provider.register(
        name=request.user_name,
        email=request.user_email,
        password=p.Secret(request.user_password),
        role=UserRole.Normal,
    )
    return RegisterResponse(
        message="User registered successfully!",
        user=UserResponse.of(user),
        token=jwt_manager.create_access_token(user.user_id, user.user_role),
    )


@router.post("/postAdmin", operation_id="register_admin", status_code=status.HTTP_201_CREATED)
@di.inject
async def register_admin(
    request: RegisterRequest,
    provider: LocalAuthProvider = Depends(di.Provide["auth.local"]),
) -> AdminRegisterResponse:
    """Register an admin.

    No token is issued: the account stays inactive until a super approves it.
    """
    admin = await provider.register(
        name=request.user_name,
        email=request.user_email,
        password=p.Secret(request.user_password),
        role=UserRole.Admin,
    )
    return AdminRegisterResponse(
        message="Admin registered successfully! Awaiting approval.",
        admin=UserResponse.of(admin),
    )


@router.post("/login", operation_id="login")
@di.inject
async def login(
    request: LoginRequest,
    provider: LocalAuthProvider = Depends(di.Provide["auth.local"]),
    jwt_manager: JWTManager = Depends(di.Provide["auth.jwt_manager"]),
) -> LoginResponse:
    """Authenticate a user and return an access token."""
    user = await provider.authenticate(request.user_email, p.Secret(request.user_password))
    return LoginResponse(
        message="Login successful",
        user=LoginUser(user_id=user.user_id, user_role=user.user_role),
        token=jwt_manager.create_access_token(user.user_id, user.user_role),
    )
