"""Local authentication provider using bcrypt for password hashing."""

from __future__ import annotations

import asyncio
import logging

import pydantic as p

from lectern.errors import AuthenticationError, NotFoundError
from lectern.model import User, UserID, UserRole, UserState
from lectern.storage import user as user_storage
from lectern.storage.record import RecordStore

from .state import ensure_active

logger = logging.getLogger(__name__)


class LocalAuthProvider(object):
    """Email and password authentication against the users table.

    Password hashes live on the user record itself.
    """

    def __init__(self, store: RecordStore, bcrypt_rounds: int = 10) -> None:
        self._store = store
        self._bcrypt_rounds = bcrypt_rounds

    async def authenticate(self, email: str, password: p.Secret[str]) -> User:
        """Authenticate with email/password.

        Raises:
            NotFoundError: no user has this email
            AuthorizationError: the user is an admin awaiting approval
            AuthenticationError: the password does not match
        """
        user = await user_storage.get(email=email, store=self._store)
        if user is None:
            raise NotFoundError("User not found")
        ensure_active(user)

        if not await self.verify_password(user, password):
            logger.info("rejected login", extra={"user_id": str(user.user_id)})
            raise AuthenticationError("Invalid password")

        return user

    async def register(self, *, name: str, email: str, password: p.Secret[str], role: UserRole) -> User:
        """Register a new user; admins start inactive until a super approves them."""
        state = UserState.Inactive if role is UserRole.Admin else UserState.Active
        user = await user_storage.create(
            name=name,
            email=email,
            password=password,
            role=role,
            state=state,
            bcrypt_rounds=self._bcrypt_rounds,
            store=self._store,
        )
        logger.info("registered user", extra={"user_id": str(user.user_id), "role": role.value})
        return user

    async def get_user(self, user_id: UserID) -> User | None:
        return await user_storage.get(user_id, store=self._store)

    async def verify_password(self, user: User, password: p.Secret[str]) -> bool:
        return await asyncio.to_thread(user_storage.verify_password, user, password.get_secret_value())
