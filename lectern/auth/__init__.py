"""Authentication and authorization."""

__all__ = [
    "Actor",
    "AuthContext",
    "Decision",
    "JWTManager",
    "LocalAuthProvider",
    "Operation",
    "TokenData",
    "authorize",
    "ensure_active",
    "get_current_user",
    "is_active",
    "require",
    "require_admin",
    "require_normal",
    "require_role",
    "require_super",
]

# lectern.core builds its containers from this package, so it must load first
import lectern.core  # noqa: F401

from .jwt import JWTManager, TokenData
from .local import LocalAuthProvider
from .middleware import AuthContext, get_current_user, require_admin, require_normal, require_role, require_super
from .policy import Actor, authorize, Decision, Operation, require
from .state import ensure_active, is_active
