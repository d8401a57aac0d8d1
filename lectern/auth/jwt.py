"""Signed access tokens.

A token names a user and the role they held when it was issued. The role
claim is informational: authorization re-reads the stored user on every
request, so demoting or deleting a user takes effect before the token expires.
"""

from __future__ import annotations

import datetime
import typing as t

import jwt
import pydantic as p

from lectern.model import UserID, UserRole


class TokenData(t.NamedTuple):
    user_id: UserID
    role: UserRole
    expires_at: datetime.datetime
    issued_at: datetime.datetime


def _timestamp(value: int) -> datetime.datetime:
    return datetime.datetime.fromtimestamp(value, tz=datetime.UTC)


class JWTManager(object):
    def __init__(
        self,
        secret_key: p.Secret[str],
        algorithm: t.Literal["HS256"] = "HS256",
        access_token_expire_minutes: int = 60,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._lifetime = datetime.timedelta(minutes=access_token_expire_minutes)

    def create_access_token(
        self, user_id: UserID, role: UserRole, expires_delta: datetime.timedelta | None = None
    ) -> str:
        issued = datetime.datetime.now(datetime.UTC)
        expires = issued + (self._lifetime if expires_delta is None else expires_delta)
        claims = {
            "sub": str(user_id),
            "user_id": str(user_id),
            "user_role": role.value,
            "exp": int(expires.timestamp()),
            "iat": int(issued.timestamp()),
        }
        return jwt.encode(claims, self._secret_key.get_secret_value(), algorithm=self._algorithm)

    def decode_token(self, token: str) -> TokenData | None:
        """Verify `token` and return its claims.

        Returns None for a token that is malformed, badly signed, expired,
        missing a required claim, or whose subject or role does not parse.
        """
        try:
            claims = jwt.decode(
                token,
                self._secret_key.get_secret_value(),
                algorithms=[self._algorithm],
                options={"require": ["sub", "exp", "iat"]},
            )
            return TokenData(
                user_id=UserID(claims["sub"]),
                role=UserRole(claims["user_role"]),
                expires_at=_timestamp(claims["exp"]),
                issued_at=_timestamp(claims["iat"]),
            )
        except (jwt.InvalidTokenError, KeyError, ValueError):
            return None
