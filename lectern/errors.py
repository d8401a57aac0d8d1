"""Errors raised by lectern services and rendered by the web layer.

Every error carries the HTTP status it maps to; the web layer renders it as
``{"error": ...}`` and, for server-side failures, an opaque ``details`` string.
"""

from __future__ import annotations

import typing as t

from fastapi import status


class LecternError(Exception):
    status_code: t.ClassVar[int] = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, error: str | t.Sequence[str]):
        self.error: str | list[str] = error if isinstance(error, str) else list(error)
        super().__init__(self.message)

    @property
    def message(self) -> str:
        return self.error if isinstance(self.error, str) else "; ".join(self.error)

    @property
    def http_status(self) -> int:
        return self.status_code

    def render(self) -> dict[str, t.Any]:
        return {"error": self.error}


class ValidationError(LecternError):
    """Malformed or missing input."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(LecternError):
    """Missing, invalid or expired credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, error: str, *, missing: bool = False):
        super().__init__(error)
        self.missing = missing

    @property
    def http_status(self) -> int:
        # a request with no credentials at all is refused, not challenged
        return status.HTTP_403_FORBIDDEN if self.missing else self.status_code


class AuthorizationError(LecternError):
    """A known identity without the privilege or ownership the operation needs."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(LecternError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(LecternError):
    status_code = status.HTTP_409_CONFLICT


class ReferenceResolutionError(LecternError):
    """One or more referenced IDs do not exist or fail a role requirement.

    `unresolved` names every failing ID, not just the first.
    """

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, error: t.Sequence[str], *, unresolved: t.Sequence[str]):
        super().__init__(error)
        self.unresolved = tuple(unresolved)


class UpstreamStoreError(LecternError):
    """A record or object store failure; `details` is for operators only."""

    def __init__(self, error: str, *, details: str):
        super().__init__(error)
        self.details = details

    def render(self) -> dict[str, t.Any]:
        return {"error": self.error, "details": self.details}
