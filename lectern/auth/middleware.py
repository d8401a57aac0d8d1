"""Authentication dependencies for FastAPI routes."""

from __future__ import annotations

import typing as t

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from lectern.core import di
from lectern.errors import AuthenticationError, AuthorizationError
from lectern.model import User, UserRole

from .jwt import JWTManager, TokenData
from .local import LocalAuthProvider
from .policy import Actor
from .state import ensure_active

# Security scheme for JWT bearer tokens
bearer_scheme = HTTPBearer(auto_error=False)


class AuthContext(t.NamedTuple):
    """Current authentication context.

    `user` is the stored record, read fresh on every request; the role in the
    token is never trusted over it.
    """

    user: User
    token_data: TokenData

    @property
    def actor(self) -> Actor:
        return Actor.of(self.user)


@di.inject
async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    jwt_manager: JWTManager = Depends(di.Provide["auth.jwt_manager"]),
    provider: LocalAuthProvider = Depends(di.Provide["auth.local"]),
) -> AuthContext:
    """Dependency to get the current authenticated user.

    Raises:
        AuthenticationError: no token (403), an invalid or expired token, or a
            token for a user that no longer exists (401)
        AuthorizationError: the user is an admin who has been deactivated
    """
    if credentials is None:
        raise AuthenticationError("Access denied. No token provided.", missing=True)

    token_data = jwt_manager.decode_token(credentials.credentials)
    if token_data is None:
        raise AuthenticationError("Invalid or expired token")

    user = await provider.get_user(token_data.user_id)
    if user is None:
        raise AuthenticationError("User not found")

    return AuthContext(user=ensure_active(user), token_data=token_data)


def require_role(*allowed_roles: UserRole) -> t.Callable[..., t.Awaitable[AuthContext]]:
    """Dependency factory to require specific roles.

    Usage:
        @router.get("/admin")
        async def admin_route(auth: AuthContext = Depends(require_role(UserRole.Admin))):
            ...
    """

    async def check_role(auth: AuthContext = Depends(get_current_user)) -> AuthContext:
        if auth.user.user_role not in allowed_roles:
            raise AuthorizationError(f"Role '{auth.user.user_role.value}' not authorized for this resource")
        return auth

    return check_role


# Convenience dependencies
require_normal = require_role(UserRole.Normal)
require_admin = require_role(UserRole.Admin, UserRole.Super)
require_super = require_role(UserRole.Super)
