"""Admin activation state machine.

Normal and super users are always active. Admins start `inactive` and move
between `inactive` and `active` only through `transition`, which only a
super actor may invoke.
"""

from __future__ import annotations

from lectern.errors import AuthorizationError, NotFoundError, ValidationError
from lectern.model import User, UserRole, UserState

InactiveAdmin = "Your account is not active. Please wait for approval."


def is_active(user: User) -> bool:
    if user.user_role is UserRole.Admin:
        return user.user_state is UserState.Active
    return True


def ensure_active(user: User) -> User:
    """Refuse an identity that may not act, at login and on every authenticated request."""
    if not is_active(user):
        raise AuthorizationError(InactiveAdmin)
    return user


def transition(target: User, state: UserState) -> UserState:
    """Validate moving `target` to `state` and return the new state.

    Raises:
        NotFoundError: if `target` is not an admin; only admins carry a state
        ValidationError: if `state` is not a member of UserState
    """
    if target.user_role is not UserRole.Admin:
        raise NotFoundError("Admin not found")
    if not isinstance(state, UserState):
        raise ValidationError([f"user_state must be one of {', '.join(s.value for s in UserState)}"])
    return state
