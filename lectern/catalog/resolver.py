"""Validation of cross-entity references.

Every method is all-or-nothing: it either returns every referenced entity, in
request order and without repeats, or raises ReferenceResolutionError naming
each ID that failed. Callers resolve before they write.
"""

from __future__ import annotations

import asyncio
import logging
import typing as t

from lectern.errors import ReferenceResolutionError
from lectern.lib.util import dedupe
from lectern.model import Book, BookID, Course, CourseID, ShortUUIDKey, User, UserID, UserRole
from lectern.storage import book as book_storage
from lectern.storage import course as course_storage
from lectern.storage import user as user_storage
from lectern.storage.record import RecordStore

logger = logging.getLogger(__name__)

KeyT = t.TypeVar("KeyT", bound=ShortUUIDKey)
EntityT = t.TypeVar("EntityT")

IDs = str | t.Sequence[str] | None


def normalize(ids: IDs) -> list[str]:
    """Accept a single ID or a list of them; drop blanks and repeats."""
    if ids is None:
        return []
    if isinstance(ids, str):
        ids = [ids]
    return dedupe(s.strip() for s in ids if s and s.strip())


class ReferenceResolver(object):
    def __init__(self, store: RecordStore) -> None:
        self._store = store

    async def users(self, ids: IDs, *, roles: t.Collection[UserRole] | None = None, label: str = "User") -> list[User]:
        """Resolve user IDs; with `roles`, a user whose role is not a member counts as unresolved."""
        found = await self._fetch(ids, UserID, lambda k: user_storage.get(k, store=self._store))
        failures = {raw: f"{label} not found: {raw}" for raw, u in found.items() if u is None}
        if roles is not None:
            allowed = ", ".join(sorted(r.value for r in roles))
            for raw, u in found.items():
                if u is not None and u.user_role not in roles:
                    failures[raw] = f"{label} {raw} must have role {allowed}"
        return self._check(found, failures, label)

    async def courses(self, ids: IDs, *, label: str = "Course") -> list[Course]:
        found = await self._fetch(ids, CourseID, lambda k: course_storage.get(k, store=self._store))
        return self._check(found, {raw: f"{label} not found: {raw}" for raw, c in found.items() if c is None}, label)

    async def books(self, ids: IDs, *, label: str = "Book") -> list[Book]:
        found = await self._fetch(ids, BookID, lambda k: book_storage.get(k, store=self._store))
        return self._check(found, {raw: f"{label} not found: {raw}" for raw, b in found.items() if b is None}, label)

    async def present_courses(self, ids: IDs) -> list[Course]:
        """Like `courses`, but IDs with no record are skipped instead of failing."""
        found = await self._fetch(ids, CourseID, lambda k: course_storage.get(k, store=self._store))
        return [c for c in found.values() if c is not None]

    async def present_books(self, ids: IDs) -> list[Book]:
        found = await self._fetch(ids, BookID, lambda k: book_storage.get(k, store=self._store))
        return [b for b in found.values() if b is not None]

    async def _fetch(
        self,
        ids: IDs,
        key_type: type[KeyT],
        fetch: t.Callable[[KeyT], t.Awaitable[EntityT | None]],
    ) -> dict[str, EntityT | None]:
        """Fetch every wanted ID concurrently; a malformed ID is simply absent.

        Store failures propagate; only absence counts as unresolved.
        """
        found: dict[str, EntityT | None] = {}
        keys: dict[str, KeyT] = {}
        for raw in normalize(ids):
            found[raw] = None
            try:
                keys[raw] = key_type(raw)
            except ValueError:
                continue

        fetched = await asyncio.gather(*(fetch(k) for k in keys.values()))
        found.update(zip(keys, fetched, strict=True))
        return found

    def _check(self, found: dict[str, EntityT | None], failures: dict[str, str], label: str) -> list[EntityT]:
        if failures:
            unresolved = [raw for raw in found if raw in failures]
            logger.info("unresolved references", extra={"kind": label, "ids": unresolved})
            raise ReferenceResolutionError([failures[raw] for raw in unresolved], unresolved=unresolved)
        return [t.cast(EntityT, entity) for entity in found.values()]
