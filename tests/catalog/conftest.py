from __future__ import annotations

import typing as t

import pydantic as p
import pytest

from lectern.catalog import ReferenceResolver, Synchronizer
from lectern.model import Book, Course, User, UserRole, UserState
from lectern.storage import book as book_storage
from lectern.storage import course as course_storage
from lectern.storage import user as user_storage
from lectern.storage.memory import MemoryRecordStore


class Catalog(object):
    """Builds fixtures straight into a record store from async tests."""

    def __init__(self, store: MemoryRecordStore) -> None:
        self.store = store
        self.resolver = ReferenceResolver(store)
        self.synchronizer = Synchronizer(store, self.resolver)

    async def user(
        self,
        email: str,
        name: str = "Someone",
        role: UserRole = UserRole.Normal,
        state: UserState = UserState.Active,
    ) -> User:
        return await user_storage.create(
            name=name,
            email=email,
            password=p.Secret("password123"),
            role=role,
            state=state,
            bcrypt_rounds=4,
            store=self.store,
        )

    async def course(self, *instructors: User, name: str = "Intro", published: bool = True) -> Course:
        course = await course_storage.create(
            name=name, price=10.0, instructors=instructors, published=published, store=self.store
        )
        await self.synchronizer.on_course_write(course)
        return course

    async def book(self, name: str = "Dune") -> Book:
        return await book_storage.create(name=name, price=20, store=self.store)

    async def reload(self, user: User) -> User:
        fresh = await user_storage.get(user.user_id, store=self.store)
        assert fresh is not None
        return fresh

    async def reload_course(self, course: Course) -> Course:
        fresh = await course_storage.get(course.course_id, store=self.store)
        assert fresh is not None
        return fresh


@pytest.fixture
def records() -> MemoryRecordStore:
    return MemoryRecordStore()


@pytest.fixture
def catalog(records: MemoryRecordStore, anyio_backend: str) -> t.Generator[Catalog]:
    yield Catalog(records)
